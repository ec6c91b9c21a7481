"""Core module containing data models, configuration, and serializer."""

from strictimpl.core.models import (
    ClassDeclaration,
    Declaration,
    Diagnostic,
    HeritageReference,
    InterfaceDeclaration,
    InterfaceSignature,
    MethodDeclaration,
    MethodSignature,
    Parameter,
    ParsedSource,
    PropertySignature,
    Severity,
    SourceSpan,
    TypeAnnotation,
    Violation,
    ViolationKind,
)
from strictimpl.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_list,
    serialize,
    serialize_to_list,
)

__all__ = [
    "ClassDeclaration",
    "Declaration",
    "Diagnostic",
    "HeritageReference",
    "InterfaceDeclaration",
    "InterfaceSignature",
    "MethodDeclaration",
    "MethodSignature",
    "Parameter",
    "ParsedSource",
    "PropertySignature",
    "SerializationError",
    "Severity",
    "SourceSpan",
    "TypeAnnotation",
    "Violation",
    "ViolationKind",
    "deserialize",
    "deserialize_from_list",
    "serialize",
    "serialize_to_list",
]
