"""
ability_manager — Blog permissions

Rules are declared in order. Every query looks at every rule;
the last one that matches decides. Nothing matches → denied.
"""

from dataclasses import dataclass, field

from ability_manager import (
    ForbiddenError,
    can,
    create_ability,
    get_reason,
    provide_ability,
    throw_if_not_allowed,
)
from ability_manager.builders import gte, or_

# ─── Your domain ───


@dataclass
class User:
    id: int
    roles: list[str] = field(default_factory=list)


def build_ability(user: User):
    ability = create_ability(actions=["publish"], resources=["Post", "Comment"])

    if "viewer" in user.roles:
        ability.allow("read", "Post", {"published": True})
        ability.allow(["read", "create"], "Comment")

    if "editor" in user.roles:
        ability.allow("manage", "Post", {"author.id": user.id})
        ability.deny("publish", "Post", {"status": or_("draft", "in_review")}).reason(
            "Only approved posts can be published"
        )
        ability.allow("publish", "Post", {"votes": gte(10)})

    if "admin" in user.roles:
        ability.allow("manage", "all")

    return ability


def show(label: str, allowed: bool, reason: str | None = None) -> None:
    mark = "ALLOWED" if allowed else "DENIED "
    suffix = f"  reason={reason}" if reason else ""
    print(f"  [{mark}] {label}{suffix}")


def main():
    alice = User(id=1, roles=["viewer", "editor"])
    draft = {"author": {"id": 1}, "status": "draft", "published": False, "votes": 3}
    popular = {"author": {"id": 1}, "status": "draft", "published": False, "votes": 12}

    with provide_ability(build_ability(alice)):
        print("── alice ──")
        show("update own draft", can("update", "Post", draft))
        show(
            "publish own draft",
            can("publish", "Post", draft),
            get_reason("publish", "Post", draft),
        )
        show("publish popular draft", can("publish", "Post", popular))
        show("delete a comment", can("delete", "Comment"))

        try:
            throw_if_not_allowed("publish", "Post", draft)
        except ForbiddenError as e:
            print(f"  raised {e.name}: {e.message}")

    with provide_ability(build_ability(User(id=2, roles=["admin"]))):
        print("── admin ──")
        show("delete a comment", can("delete", "Comment"))


if __name__ == "__main__":
    main()
