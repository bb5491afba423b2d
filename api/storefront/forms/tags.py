"""Tag editor state for media forms."""

from __future__ import annotations

from storefront.core.config import settings

COMMIT_KEYS = frozenset({"Enter", ","})


class TagEditor:
    """Ordered, de-duplicated tag list with a hard cap.

    Commits that would duplicate a tag, add a blank tag or exceed the cap are
    dropped silently; the cap disables input rather than raising.
    """

    def __init__(self, tags: list[str] | None = None, *, max_tags: int | None = None) -> None:
        self.max_tags = max_tags if max_tags is not None else settings.max_tags
        self.tags: list[str] = []
        self.tag_input = ""
        for tag in tags or []:
            self._append(tag.strip() if isinstance(tag, str) else "")

    @property
    def accepting(self) -> bool:
        return len(self.tags) < self.max_tags

    def on_key_commit(self, key: str) -> bool:
        """Handle a key press; returns True when a tag was appended."""
        if key not in COMMIT_KEYS:
            return False
        candidate = self.tag_input.strip()
        if self._append(candidate):
            self.tag_input = ""
            return True
        return False

    def commit(self, value: str) -> bool:
        """Type ``value`` into the input and press Enter."""
        self.tag_input = value
        return self.on_key_commit("Enter")

    def remove_tag(self, value: str) -> bool:
        try:
            self.tags.remove(value)
        except ValueError:
            return False
        return True

    def _append(self, candidate: str) -> bool:
        if not candidate or candidate in self.tags or not self.accepting:
            return False
        self.tags.append(candidate)
        return True
