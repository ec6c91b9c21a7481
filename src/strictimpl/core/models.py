"""Data models for the strict interface implementation check.

This module defines the read-only views the analysis works on: source spans,
type annotations, method signatures, interface and class declarations, and the
violations and diagnostics the check produces.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Diagnostic severity reported to the host."""

    ERROR = "error"
    WARNING = "warning"


class ViolationKind(str, Enum):
    """Kind of substitutability violation."""

    PARAMETER_NARROWED = "parameter_narrowed"
    PARAMETER_OPTIONAL = "parameter_optional"
    MISSING_PARAMETER = "missing_parameter"
    RETURN_WIDENED = "return_widened"


class FrozenModel(BaseModel):
    """Base class for immutable models."""

    model_config = ConfigDict(frozen=True)


class SourceSpan(FrozenModel):
    """Location of one syntactic element inside a file."""

    start_offset: int = Field(..., ge=0, description="Byte offset of the first character")
    length: int = Field(..., ge=0, description="Length in bytes")
    line: int = Field(1, ge=1, description="1-based line")
    column: int = Field(1, ge=1, description="1-based column")

    @property
    def end_offset(self) -> int:
        return self.start_offset + self.length


class TypeAnnotation(FrozenModel):
    """A type annotation as written in source.

    The ``expr`` field holds an oracle-specific parsed form of the annotation.
    The analysis core never inspects it; it is handed back to the oracle.
    """

    text: str = Field(..., description="Annotation text as written")
    span: SourceSpan
    scope: str = Field("", description="Module the annotation is written in")
    expr: Any = Field(None, exclude=True, repr=False)


class HeritageReference(FrozenModel):
    """A name written in an ``implements`` or ``extends`` clause."""

    name: str = Field(..., description="Referenced name without type arguments")
    span: SourceSpan
    scope: str = Field("", description="Module the reference is written in")


class Parameter(FrozenModel):
    """Positional parameter of a method."""

    name: str
    type: TypeAnnotation | None = None
    optional: bool = False
    rest: bool = False
    span: SourceSpan

    @property
    def required(self) -> bool:
        return not self.optional and not self.rest

    @property
    def location(self) -> SourceSpan:
        """Span of the type annotation, or of the parameter when unannotated."""
        return self.type.span if self.type is not None else self.span


class MethodSignature(FrozenModel):
    """Method member of an interface declaration."""

    name: str
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeAnnotation | None = None
    owner_id: str = Field(..., description="Declaration id of the owning interface")
    owner_name: str = Field(..., description="Name of the owning interface")
    ordinal: int = Field(0, ge=0, description="Position among the owner's members")
    span: SourceSpan

    @property
    def key(self) -> tuple[str, int]:
        """Identity of this member: owning declaration and ordinal."""
        return (self.owner_id, self.ordinal)


class MethodDeclaration(FrozenModel):
    """Concrete method declared in a class body."""

    name: str
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeAnnotation | None = None
    is_static: bool = False
    ordinal: int = Field(0, ge=0, description="Declaration order within the class")
    name_span: SourceSpan
    span: SourceSpan


class PropertySignature(FrozenModel):
    """Property member of an interface or class (used for structural typing)."""

    name: str
    type: TypeAnnotation | None = None
    optional: bool = False


class InterfaceDeclaration(FrozenModel):
    """One syntactic interface declaration fragment."""

    kind: Literal["interface"] = "interface"
    declaration_id: str
    name: str
    scope: str = ""
    span: SourceSpan
    extends: tuple[HeritageReference, ...] = ()
    methods: tuple[MethodSignature, ...] = ()
    properties: tuple[PropertySignature, ...] = ()


class ClassDeclaration(FrozenModel):
    """One class declaration (or named/anonymous class expression)."""

    kind: Literal["class"] = "class"
    declaration_id: str
    name: str
    scope: str = ""
    span: SourceSpan
    implements: tuple[HeritageReference, ...] = ()
    extends: tuple[HeritageReference, ...] = ()
    methods: tuple[MethodDeclaration, ...] = ()
    properties: tuple[PropertySignature, ...] = ()


Declaration = Union[InterfaceDeclaration, ClassDeclaration]


class InterfaceSignature(FrozenModel):
    """Resolved interface with its effective member set.

    ``members`` holds the interface's own method signatures and those of all
    its ancestors, a closer declaration's member shadowing a farther one of
    the same name.
    """

    declaration_id: str
    name: str
    members: tuple[MethodSignature, ...] = ()

    def members_named(self, name: str) -> list[MethodSignature]:
        return [member for member in self.members if member.name == name]


class Violation(FrozenModel):
    """One substitutability violation of a class method."""

    class_name: str
    method: MethodDeclaration
    interface_method: MethodSignature
    position: int | Literal["return"]
    kind: ViolationKind
    reason: str
    span: SourceSpan

    @property
    def parameter_name(self) -> str | None:
        if self.position == "return":
            return None
        if self.position < len(self.method.parameters):
            return self.method.parameters[self.position].name
        if self.position < len(self.interface_method.parameters):
            return self.interface_method.parameters[self.position].name
        return None


class Diagnostic(FrozenModel):
    """Positioned diagnostic record handed to the host."""

    file_path: str
    start_offset: int = Field(..., ge=0)
    length: int = Field(..., ge=0)
    line: int = Field(1, ge=1)
    column: int = Field(1, ge=1)
    message: str
    rule_id: str
    severity: Severity = Severity.ERROR


class ParsedSource(FrozenModel):
    """Class declarations of one source file, in source order."""

    file_path: str
    scope: str = ""
    classes: tuple[ClassDeclaration, ...] = ()
