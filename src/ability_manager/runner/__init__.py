# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for evaluating permission queries from JSON.

Usage:
    python -m ability_manager.runner < input.json > output.json

A document declares rules in priority order and lists queries; the runner
answers each query with a DecisionSchema.  AbilityFactory turns the rules
into an Ability and Executor drives the evaluation.
"""

from .executor import Executor
from .factory import AbilityFactory, AbilityFactoryError
from .schema import (
    DecisionSchema,
    QuerySchema,
    RuleSchema,
    RunnerInput,
    RunnerOutput,
    VocabularySchema,
)

__all__ = [
    "AbilityFactory",
    "AbilityFactoryError",
    "DecisionSchema",
    "Executor",
    "QuerySchema",
    "RuleSchema",
    "RunnerInput",
    "RunnerOutput",
    "VocabularySchema",
]
