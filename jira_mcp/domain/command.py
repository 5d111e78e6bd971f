from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable


@dataclass(frozen=True)
class ParameterSpec:
    """커맨드 파라미터 선언 (문서화/도구 스키마 용도, 런타임 검증에는 쓰지 않음)"""
    type: str
    required: bool
    description: str
    items: dict[str, Any] | None = None

    def to_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.items is not None:
            schema["items"] = self.items
        return schema


CommandRunner = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class CommandDescriptor:
    """이름으로 조회되는 커맨드 정의 (프로세스 시작 시 한 번 생성)"""
    name: str
    description: str
    parameters: dict[str, ParameterSpec]
    run: CommandRunner = field(repr=False)

    def input_schema(self) -> dict[str, Any]:
        """MCP Tool inputSchema 형식의 JSON 스키마를 반환합니다."""
        return {
            "type": "object",
            "properties": {name: spec.to_schema() for name, spec in self.parameters.items()},
            "required": [name for name, spec in self.parameters.items() if spec.required],
        }


def error_result(message: str, **extra: Any) -> dict[str, Any]:
    """커맨드 공통 실패 응답 {error: True, message} 를 만듭니다."""
    return {"error": True, "message": message, **extra}
