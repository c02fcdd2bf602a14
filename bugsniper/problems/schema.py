"""
Problem File Schema - Pydantic documents for problem files.

Problem files (YAML or JSON) use the same field names as the game's
problem data:

    id: js-001
    codeLanguage: javascript
    level: 1
    code:
      - "function total(items) {"
      - "  let sum;"
    issues:
      - id: uninitialized-sum
        lines: [2]
        type: bug
        severity: normal
        score: 3
        description:
          ja: "..."
          en: "sum is never initialized"

Documents are validated here, then converted to the frozen domain types.
"""

from types import MappingProxyType
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .model import Issue, Problem, IssueType, Severity, CODE_LANGUAGES, MIN_LEVEL, MAX_LEVEL


class IssueDocument(BaseModel):
    """One issue entry in a problem file."""
    id: str = Field(..., min_length=1)
    lines: list[int] = Field(..., min_length=1, description="1-based line numbers")
    type: IssueType
    severity: Severity = Severity.NORMAL
    score: int = Field(..., gt=0, description="Base score before combo")
    description: dict[str, str] = Field(default_factory=dict)

    @field_validator("lines")
    @classmethod
    def lines_are_positive(cls, value: list[int]) -> list[int]:
        if any(line < 1 for line in value):
            raise ValueError("issue lines are 1-based")
        return value

    def to_issue(self) -> Issue:
        return Issue(
            issue_id=self.id,
            lines=frozenset(self.lines),
            category=self.type,
            severity=self.severity,
            score=self.score,
            description=MappingProxyType(dict(self.description)),
        )


class ProblemDocument(BaseModel):
    """One problem in a problem file."""
    id: str = Field(..., min_length=1)
    code_language: str = Field(..., alias="codeLanguage")
    level: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL)
    code: list[str] = Field(..., min_length=1)
    issues: list[IssueDocument] = Field(default_factory=list)
    title: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("code_language")
    @classmethod
    def known_language(cls, value: str) -> str:
        if value not in CODE_LANGUAGES:
            raise ValueError(f"unknown code language '{value}'")
        return value

    @model_validator(mode="after")
    def issues_fit_code(self) -> "ProblemDocument":
        seen: set[str] = set()
        for issue in self.issues:
            if issue.id in seen:
                raise ValueError(f"duplicate issue id '{issue.id}'")
            seen.add(issue.id)
            out_of_range = [line for line in issue.lines if line > len(self.code)]
            if out_of_range:
                raise ValueError(
                    f"issue '{issue.id}' references lines {out_of_range} "
                    f"beyond the {len(self.code)}-line snippet"
                )
        return self

    def to_problem(self) -> Problem:
        return Problem(
            problem_id=self.id,
            code_language=self.code_language,
            level=self.level,
            code=tuple(self.code),
            issues=tuple(issue.to_issue() for issue in self.issues),
        )
