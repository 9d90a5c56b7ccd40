from enum import Enum


class StatusCode(Enum):
    """Enumeration of the version control states a tree node can be in."""
    CLEAN = "clean"
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNTRACKED = "untracked"
    COMMITTED = "committed"  # Differs from the base ref only through commits

    def is_clean(self) -> bool:
        """Check whether this status means "no change"."""
        return self is StatusCode.CLEAN

    def glyph(self) -> str:
        """Get the single character used to display this status."""
        return _GLYPHS[self]

    @classmethod
    def from_letter(cls, letter: str) -> 'StatusCode':
        """
        Map a git status letter onto a status code.

        Args:
            letter: One of git's status letters (M, A, D, R, C, T, U, ?)

        Returns:
            The matching status code; unknown letters count as modified
        """
        if letter in (' ', ''):
            return cls.CLEAN

        return _LETTERS.get(letter, cls.MODIFIED)

    @classmethod
    def from_porcelain(cls, xy: str) -> 'StatusCode':
        """
        Map a two-character porcelain status onto a status code.

        The index column wins over the work tree column when both are set.
        Unmerged entries are reported as modified.

        Args:
            xy: The first two characters of a `git status --porcelain` line

        Returns:
            The matching status code
        """
        xy = (xy + "  ")[:2]
        if xy == "??":
            return cls.UNTRACKED

        if 'U' in xy or xy in ("AA", "DD"):
            return cls.MODIFIED

        letter = xy[0] if xy[0] != ' ' else xy[1]
        return cls.from_letter(letter)


_LETTERS = {
    'M': StatusCode.MODIFIED,
    'T': StatusCode.MODIFIED,
    'A': StatusCode.ADDED,
    'D': StatusCode.DELETED,
    'R': StatusCode.RENAMED,
    'C': StatusCode.COPIED,
    '?': StatusCode.UNTRACKED,
}

_GLYPHS = {
    StatusCode.CLEAN: " ",
    StatusCode.MODIFIED: "M",
    StatusCode.ADDED: "A",
    StatusCode.DELETED: "D",
    StatusCode.RENAMED: "R",
    StatusCode.COPIED: "C",
    StatusCode.UNTRACKED: "?",
    StatusCode.COMMITTED: "c",
}
