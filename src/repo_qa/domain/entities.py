"""Domain entities: pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class EntryKind(str, Enum):
    """Kind of a repository root entry, as reported by the contents API."""

    FILE = "file"
    DIR = "dir"


class RiskLevel(str, Enum):
    """Severity attached to a risk finding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    """Priority of a generated test descriptor."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class OutcomeStatus(str, Enum):
    """Final status of one executed test, retries folded in."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


# ── Repository analysis ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RootEntry:
    """A file or directory directly under the repository root."""

    name: str
    kind: EntryKind


@dataclass(frozen=True, slots=True)
class StructureSummary:
    """Keyword classification of the repository root."""

    root_files: list[str] = field(default_factory=list)
    has_tests: bool = False
    has_docs: bool = False
    has_ci: bool = False
    config_files: list[str] = field(default_factory=list)
    package_managers: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FrameworkMap:
    """Detected framework names bucketed by language family."""

    javascript: list[str] = field(default_factory=list)
    python: list[str] = field(default_factory=list)
    ruby: list[str] = field(default_factory=list)
    java: list[str] = field(default_factory=list)
    golang: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[str]]:
        return {
            "javascript": list(self.javascript),
            "python": list(self.python),
            "ruby": list(self.ruby),
            "java": list(self.java),
            "golang": list(self.golang),
            "other": list(self.other),
        }


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """One recent commit on the default branch."""

    sha: str
    message: str
    author: str | None = None
    date: str | None = None


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """High-level metadata about a GitHub repository."""

    name: str
    full_name: str
    description: str | None = None
    url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    stars: int = 0
    forks: int = 0


@dataclass(frozen=True, slots=True)
class RepositorySnapshot:
    """Everything ``analyze`` learned about one repository."""

    metadata: RepoMetadata
    languages: dict[str, int]
    structure: StructureSummary
    frameworks: FrameworkMap
    commits: list[CommitInfo] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.metadata.name


# ── Risk checklist ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RiskFinding:
    """One structured risk record with a severity and remediation hint."""

    type: str
    description: str
    level: RiskLevel
    remediation: str
    files: list[str] | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True)
class RiskSummary:
    """Counts of findings by severity across all three passes."""

    total_risks: int
    high_risks: int
    medium_risks: int
    low_risks: int


@dataclass(frozen=True, slots=True)
class RiskReport:
    """Aggregate of findings for one repository path."""

    security_risks: list[RiskFinding]
    code_quality_risks: list[RiskFinding]
    configuration_risks: list[RiskFinding]
    summary: RiskSummary


# ── Test descriptors ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TestDescriptor:
    """A generated, not executed, test specification record."""

    __test__ = False

    name: str
    description: str
    priority: Priority
    type: str
    framework: str | None = None
    template: str | None = None
    url: str | None = None


TEST_CATEGORIES: tuple[str, ...] = (
    "unitTests",
    "integrationTests",
    "e2eTests",
    "apiTests",
    "performanceTests",
    "securityTests",
)


@dataclass(frozen=True, slots=True)
class TestSuitePlan:
    """Generated descriptors grouped by category."""

    __test__ = False

    unit_tests: list[TestDescriptor] = field(default_factory=list)
    integration_tests: list[TestDescriptor] = field(default_factory=list)
    e2e_tests: list[TestDescriptor] = field(default_factory=list)
    api_tests: list[TestDescriptor] = field(default_factory=list)
    performance_tests: list[TestDescriptor] = field(default_factory=list)
    security_tests: list[TestDescriptor] = field(default_factory=list)

    def by_category(self) -> dict[str, list[TestDescriptor]]:
        """Return ``{category: descriptors}`` in the canonical category order."""
        return dict(
            zip(
                TEST_CATEGORIES,
                (
                    self.unit_tests,
                    self.integration_tests,
                    self.e2e_tests,
                    self.api_tests,
                    self.performance_tests,
                    self.security_tests,
                ),
            )
        )

    @property
    def total(self) -> int:
        return sum(len(tests) for tests in self.by_category().values())


# ── Test execution ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TestOutcome:
    """Result of one executed test, independent of any retries."""

    __test__ = False

    name: str
    suite: str
    status: OutcomeStatus
    duration: int = 0
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Aggregate counts for one test run.

    Counts are always derived from ``tests`` by :meth:`from_outcomes`, so
    ``total == passed + failed + skipped`` holds for every instance built that
    way, including the zeroed summary returned on runner failure.
    """

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration: int = 0
    timestamp: str = ""
    tests: list[TestOutcome] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_outcomes(
        cls,
        outcomes: list[TestOutcome],
        duration: int = 0,
        timestamp: str = "",
        error: str | None = None,
    ) -> RunSummary:
        return cls(
            total=len(outcomes),
            passed=sum(1 for o in outcomes if o.status is OutcomeStatus.PASSED),
            failed=sum(1 for o in outcomes if o.status is OutcomeStatus.FAILED),
            skipped=sum(1 for o in outcomes if o.status is OutcomeStatus.SKIPPED),
            duration=max(duration, 0),
            timestamp=timestamp,
            tests=list(outcomes),
            error=error,
        )

    @classmethod
    def empty(cls, error: str | None = None, timestamp: str = "") -> RunSummary:
        return cls.from_outcomes([], timestamp=timestamp, error=error)

    def merge(self, other: RunSummary) -> RunSummary:
        """Concatenate two runs; errors from both sides are kept."""
        errors = [e for e in (self.error, other.error) if e]
        merged = RunSummary.from_outcomes(
            [*self.tests, *other.tests],
            duration=self.duration + other.duration,
            timestamp=self.timestamp or other.timestamp,
            error="; ".join(errors) or None,
        )
        return merged

    def with_timestamp(self, timestamp: str) -> RunSummary:
        return replace(self, timestamp=timestamp)
