"""Request/response Pydantic models for the HTTP API (camelCase on the wire)."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blog_capture.models import CaptureItem, CaptureResult, CaptureSession


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CaptureItemIn(_CamelModel):
    index: int = Field(ge=1)
    date: str = ""
    name: str = ""
    link: str
    title: str = ""

    def to_item(self) -> CaptureItem:
        return CaptureItem(
            index=self.index, date=self.date, name=self.name, link=self.link, title=self.title
        )


class CaptureRequest(_CamelModel):
    items: List[CaptureItemIn] = []


class CaptureResultSchema(_CamelModel):
    index: int
    date: str = ""
    name: str = ""
    link: str = ""
    title: str = ""
    success: bool
    blog_title: str = ""
    filename: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: CaptureResult) -> "CaptureResultSchema":
        return cls(
            index=result.index,
            date=result.date,
            name=result.name,
            link=result.link,
            title=result.title,
            success=result.success,
            blog_title=result.blog_title,
            filename=result.filename,
            error=result.error,
        )

    def to_result(self) -> CaptureResult:
        return CaptureResult(
            index=self.index,
            date=self.date,
            name=self.name,
            link=self.link,
            title=self.title,
            success=self.success,
            blog_title=self.blog_title,
            filename=self.filename,
            error=self.error,
        )


class CaptureResponse(_CamelModel):
    success: bool = True
    session_id: str
    results: List[CaptureResultSchema]
    total_count: int
    success_count: int

    @classmethod
    def from_session(cls, session: CaptureSession) -> "CaptureResponse":
        return cls(
            session_id=session.session_id,
            results=[CaptureResultSchema.from_result(r) for r in session.results],
            total_count=session.total_count,
            success_count=session.success_count,
        )


class ExportRequest(_CamelModel):
    results: List[CaptureResultSchema] = []
