from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class StudentRecord(BaseModel):
    """
    One student registration, persisted as a JSON object.

    Fields
    - name: letters and spaces, at least two characters.
    - student_id: digits only; serialized as "studentId" and always kept as text
      so leading zeros survive.
    - email: address in "local@domain.tld" shape.
    - contact: ten or more digits, kept as text.

    Notes
    - The model only enforces shape (four strings, no coercion). Field rules live
      in `common.validation` and are applied before a record reaches the store.
    - Records are frozen; an edit replaces the whole record.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    name: str = Field(description="Student full name")
    student_id: str = Field(alias="studentId", description="Numeric student ID as text")
    email: str = Field(description="Contact email address")
    contact: str = Field(description="Phone number, digits only")

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialized mapping using the persisted field names."""
        return self.model_dump(by_alias=True)


RecordList = TypeAdapter(List[StudentRecord])
