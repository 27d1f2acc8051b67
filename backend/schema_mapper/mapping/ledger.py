"""Path-keyed store of the currently live validation issues."""

from __future__ import annotations

from collections.abc import Iterable

from schema_mapper.mapping.paths import ensure_path, is_under
from schema_mapper.mapping.types import IssueCode, ValidationIssue, ValidationReport


class ValidationLedger:
    """Accumulates issues per opaque path string.

    ``add`` never replaces earlier issues. Callers re-validating a path use
    ``replace`` (or ``clear_for_path`` followed by ``add``) so that only one
    set of issues is live per path. Producers that re-run over many paths,
    such as schema evaluation or hover feedback, use ``replace_from`` so that
    only the issues they recorded themselves are swapped out.
    """

    def __init__(self) -> None:
        self._issues: dict[str, list[ValidationIssue]] = {}
        self._sources: dict[str, list[ValidationIssue]] = {}

    def add(self, issue: ValidationIssue) -> None:
        self._append(issue)

    def add_all(self, issues: Iterable[ValidationIssue]) -> None:
        for issue in issues:
            self.add(issue)

    def replace(self, path: str, issues: Iterable[ValidationIssue]) -> None:
        """Clear ``path`` and add ``issues`` in one step."""

        ensure_path(path)
        pending = list(issues)
        for issue in pending:
            if issue.path != path:
                raise ValueError(f"issue path '{issue.path}' does not match '{path}'")
        self.clear_for_path(path)
        self.add_all(pending)

    def replace_from(self, source: str, issues: Iterable[ValidationIssue]) -> None:
        """Swap the issues last recorded by ``source`` for ``issues``.

        Issues from other producers stay live, even at the same paths. An
        incoming issue identical to one already live is not recorded for
        ``source`` and survives its next ``replace_from``.
        """

        pending = list(issues)
        for issue in pending:
            ensure_path(issue.path)
        for issue in self._sources.pop(source, []):
            self._remove(issue)
        self._sources[source] = [issue for issue in pending if self._append(issue)]

    def discard(self, issue: ValidationIssue) -> None:
        """Remove one issue if it is live."""

        if self._remove(issue):
            self._prune_sources()

    def clear_for_path(self, path: str) -> None:
        if self._issues.pop(path, None) is not None:
            self._prune_sources()

    def clear_under(self, prefix: str) -> None:
        """Drop every path at or structurally below ``prefix``."""

        ensure_path(prefix)
        for path in [path for path in self._issues if is_under(path, prefix)]:
            del self._issues[path]
        self._prune_sources()

    def clear_by_code(self, code: IssueCode) -> None:
        for path in list(self._issues):
            remaining = [issue for issue in self._issues[path] if issue.code != code]
            if remaining:
                self._issues[path] = remaining
            else:
                del self._issues[path]
        self._prune_sources()

    def reset(self) -> None:
        self._issues.clear()
        self._sources.clear()

    def issues_from(self, source: str) -> list[ValidationIssue]:
        return list(self._sources.get(source, ()))

    def errors_for_path(self, path: str) -> list[ValidationIssue]:
        return list(self._issues.get(path, ()))

    def has_errors_for_path(self, path: str) -> bool:
        return any(issue.is_error for issue in self._issues.get(path, ()))

    @property
    def has_errors(self) -> bool:
        return any(issue.is_error for bucket in self._issues.values() for issue in bucket)

    @property
    def has_warnings(self) -> bool:
        return any(not issue.is_error for bucket in self._issues.values() for issue in bucket)

    @property
    def paths(self) -> list[str]:
        return [path for path, bucket in self._issues.items() if bucket]

    @property
    def issues(self) -> list[ValidationIssue]:
        return [issue for bucket in self._issues.values() for issue in bucket]

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.is_error]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if not issue.is_error]

    @property
    def issue_count(self) -> int:
        return sum(len(bucket) for bucket in self._issues.values())

    def snapshot(self) -> ValidationReport:
        return ValidationReport(errors=self.errors, warnings=self.warnings)

    def _append(self, issue: ValidationIssue) -> bool:
        ensure_path(issue.path)
        bucket = self._issues.setdefault(issue.path, [])
        key = (issue.code, issue.message, issue.severity)
        if any((existing.code, existing.message, existing.severity) == key for existing in bucket):
            return False
        bucket.append(issue)
        return True

    def _remove(self, issue: ValidationIssue) -> bool:
        bucket = self._issues.get(issue.path)
        if not bucket or issue not in bucket:
            return False
        bucket.remove(issue)
        if not bucket:
            del self._issues[issue.path]
        return True

    def _prune_sources(self) -> None:
        # Recorded issues removed by a path or code clear are no longer owned.
        for source, recorded in self._sources.items():
            self._sources[source] = [
                issue for issue in recorded if issue in self._issues.get(issue.path, ())
            ]

    def __len__(self) -> int:
        return self.issue_count

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and bool(self._issues.get(path))
