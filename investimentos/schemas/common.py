"""
Common / shared Pydantic schemas used across multiple endpoints.

- ``CamelModel``: base for every public payload. Python attributes stay
  snake_case; JSON keys are camelCase (``saldoTotal``, ``investidorId``).
  Either spelling is accepted on input.
- Error envelopes, so OpenAPI documents the error contract as well as the
  happy path.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase JSON aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Standard error envelope returned by all non-validation error handlers."""

    error: bool = Field(default=True, description="Always ``true`` for errors")
    message: str = Field(
        ...,
        description="Human-readable error description",
        examples=["Investidor with id '42' not found"],
    )


class ValidationErrorDetail(BaseModel):
    """Single field-level validation failure."""

    field: str = Field(
        ...,
        description="Arrow-separated path to the invalid field",
        examples=["body -> saldoTotal"],
    )
    message: str = Field(
        ...,
        description="Explanation of the validation failure",
        examples=["Input should be greater than or equal to 0"],
    )


class ValidationErrorResponse(BaseModel):
    """
    Response body for 400 Bad Request caused by request validation.

    ``details`` maps each failure to the offending field.
    """

    error: bool = Field(default=True, description="Always ``true`` for errors")
    message: str = Field(default="Validation failed", description="Summary message")
    details: List[ValidationErrorDetail] = Field(..., description="Per-field validation failures")


class FileExportResponse(CamelModel):
    """Result of an export: where the file was written."""

    arquivo: str = Field(..., description="Path of the generated file")
    mensagem: str


class FileImportResponse(CamelModel):
    """Result of an import: how many records were stored out of how many read."""

    mensagem: str
    importados: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
