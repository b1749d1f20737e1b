"""Pydantic models for the JSON documents written to and read from disk.

Documents use camelCase keys; each model converts to and from the matching
domain entity.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from repo_qa.domain.entities import (
    CommitInfo,
    FrameworkMap,
    OutcomeStatus,
    Priority,
    RepoMetadata,
    RepositorySnapshot,
    RiskFinding,
    RiskLevel,
    RiskReport,
    RiskSummary,
    RunSummary,
    StructureSummary,
    TestDescriptor,
    TestOutcome,
)


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self, *, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


# ── Analysis ────────────────────────────────────────────────────────────────


class StructureModel(_Document):
    root_files: list[str] = Field(default_factory=list)
    has_tests: bool = False
    has_docs: bool = False
    has_ci: bool = Field(default=False, alias="hasCI")
    config_files: list[str] = Field(default_factory=list)
    package_managers: list[str] = Field(default_factory=list)


class FrameworksModel(_Document):
    javascript: list[str] = Field(default_factory=list)
    python: list[str] = Field(default_factory=list)
    ruby: list[str] = Field(default_factory=list)
    java: list[str] = Field(default_factory=list)
    golang: list[str] = Field(default_factory=list)
    other: list[str] = Field(default_factory=list)

    def to_entity(self) -> FrameworkMap:
        return FrameworkMap(**self.model_dump())


class CommitModel(_Document):
    sha: str
    message: str
    author: str | None = None
    date: str | None = None


class RepositorySnapshotModel(_Document):
    """The ``analyze`` output document."""

    name: str
    full_name: str | None = None
    description: str | None = None
    url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    stars: int = 0
    forks: int = 0
    languages: dict[str, int] = Field(default_factory=dict)
    structure: StructureModel = Field(default_factory=StructureModel)
    commits: list[CommitModel] = Field(default_factory=list)
    frameworks: FrameworksModel = Field(default_factory=FrameworksModel)

    @classmethod
    def from_entity(cls, snapshot: RepositorySnapshot) -> RepositorySnapshotModel:
        meta = snapshot.metadata
        s = snapshot.structure
        return cls(
            name=meta.name,
            full_name=meta.full_name,
            description=meta.description,
            url=meta.url,
            created_at=meta.created_at,
            updated_at=meta.updated_at,
            stars=meta.stars,
            forks=meta.forks,
            languages=dict(snapshot.languages),
            structure=StructureModel(
                root_files=list(s.root_files),
                has_tests=s.has_tests,
                has_docs=s.has_docs,
                has_ci=s.has_ci,
                config_files=list(s.config_files),
                package_managers=list(s.package_managers),
            ),
            commits=[
                CommitModel(sha=c.sha, message=c.message, author=c.author, date=c.date)
                for c in snapshot.commits
            ],
            frameworks=FrameworksModel(**snapshot.frameworks.as_dict()),
        )

    def to_entity(self) -> RepositorySnapshot:
        return RepositorySnapshot(
            metadata=RepoMetadata(
                name=self.name,
                full_name=self.full_name or self.name,
                description=self.description,
                url=self.url,
                created_at=self.created_at,
                updated_at=self.updated_at,
                stars=self.stars,
                forks=self.forks,
            ),
            languages=dict(self.languages),
            structure=StructureSummary(
                root_files=list(self.structure.root_files),
                has_tests=self.structure.has_tests,
                has_docs=self.structure.has_docs,
                has_ci=self.structure.has_ci,
                config_files=list(self.structure.config_files),
                package_managers=list(self.structure.package_managers),
            ),
            frameworks=self.frameworks.to_entity(),
            commits=[
                CommitInfo(sha=c.sha, message=c.message, author=c.author, date=c.date)
                for c in self.commits
            ],
        )


# ── Test descriptors ────────────────────────────────────────────────────────


class DescriptorModel(_Document):
    name: str
    description: str
    framework: str | None = None
    priority: Priority
    type: str
    template: str | None = None
    url: str | None = None

    @classmethod
    def from_entity(cls, descriptor: TestDescriptor) -> DescriptorModel:
        return cls(
            name=descriptor.name,
            description=descriptor.description,
            framework=descriptor.framework,
            priority=descriptor.priority,
            type=descriptor.type,
            template=descriptor.template,
            url=descriptor.url,
        )


# ── Risk report ─────────────────────────────────────────────────────────────


class RiskFindingModel(_Document):
    type: str
    description: str
    level: RiskLevel
    files: list[str] | None = None
    url: str | None = None
    remediation: str

    @classmethod
    def from_entity(cls, finding: RiskFinding) -> RiskFindingModel:
        return cls(
            type=finding.type,
            description=finding.description,
            level=finding.level,
            files=finding.files,
            url=finding.url,
            remediation=finding.remediation,
        )


class RiskSummaryModel(_Document):
    total_risks: int
    high_risks: int
    medium_risks: int
    low_risks: int


class RiskReportModel(_Document):
    """The ``analyze-risks`` output document."""

    security_risks: list[RiskFindingModel]
    code_quality_risks: list[RiskFindingModel]
    configuration_risks: list[RiskFindingModel]
    summary: RiskSummaryModel

    @classmethod
    def from_entity(cls, report: RiskReport) -> RiskReportModel:
        summary: RiskSummary = report.summary
        return cls(
            security_risks=[RiskFindingModel.from_entity(f) for f in report.security_risks],
            code_quality_risks=[RiskFindingModel.from_entity(f) for f in report.code_quality_risks],
            configuration_risks=[
                RiskFindingModel.from_entity(f) for f in report.configuration_risks
            ],
            summary=RiskSummaryModel(
                total_risks=summary.total_risks,
                high_risks=summary.high_risks,
                medium_risks=summary.medium_risks,
                low_risks=summary.low_risks,
            ),
        )


# ── Run results ─────────────────────────────────────────────────────────────


class OutcomeModel(_Document):
    name: str
    suite: str
    status: OutcomeStatus
    duration: int = 0
    error: str | None = None


class RunCountsModel(_Document):
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration: int = 0


class RunResultsModel(_Document):
    """The ``run-tests`` output document, read back by ``generate-report``."""

    summary: RunCountsModel = Field(default_factory=RunCountsModel)
    tests: list[OutcomeModel] = Field(default_factory=list)
    timestamp: str = ""
    error: str | None = None

    @classmethod
    def from_entity(cls, run: RunSummary) -> RunResultsModel:
        return cls(
            summary=RunCountsModel(
                total=run.total,
                passed=run.passed,
                failed=run.failed,
                skipped=run.skipped,
                duration=run.duration,
            ),
            tests=[
                OutcomeModel(
                    name=t.name,
                    suite=t.suite,
                    status=t.status,
                    duration=t.duration,
                    error=t.error,
                )
                for t in run.tests
            ],
            timestamp=run.timestamp,
            error=run.error,
        )

    def to_entity(self) -> RunSummary:
        return RunSummary(
            total=self.summary.total,
            passed=self.summary.passed,
            failed=self.summary.failed,
            skipped=self.summary.skipped,
            duration=self.summary.duration,
            timestamp=self.timestamp,
            tests=[
                TestOutcome(
                    name=t.name,
                    suite=t.suite,
                    status=t.status,
                    duration=t.duration,
                    error=t.error,
                )
                for t in self.tests
            ],
            error=self.error,
        )

    def to_json_dict(self, *, exclude_none: bool = False) -> dict[str, Any]:
        data = super().to_json_dict(exclude_none=exclude_none)
        if data.get("error") is None:
            data.pop("error", None)
        return data
