"""Config, tool, field and step dataclasses parsed from hub JSON."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


ELEMENT_STATES = ("visible", "exists", "hidden")
EXTRACT_MODES = ("text", "html", "list", "table", "attribute")


# ---------------------------------------------------------------------------
# Tool fields (closed set keyed by `type`)
# ---------------------------------------------------------------------------

@dataclass
class SelectOption:
    value: str
    label: str = ""


@dataclass
class RadioOption:
    value: str
    selector: str
    label: str = ""


@dataclass
class ToolField:
    """A form field filled from one tool parameter.

    `type` is one of FIELD_TYPES. Only select and radio fields carry
    options; radio options each point at their own input element.
    """

    type: str
    selector: str
    name: str
    description: str = ""
    required: bool = False
    default_value: Any = None
    options: list[SelectOption | RadioOption] = field(default_factory=list)
    dynamic_options: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolField":
        kind = data.get("type", "")
        if kind not in FIELD_TYPES:
            raise ValueError(f"Unknown field type: {kind!r}")
        options: list[SelectOption | RadioOption] = []
        for opt in data.get("options") or []:
            if kind == "radio":
                options.append(RadioOption(
                    value=str(opt["value"]),
                    selector=opt["selector"],
                    label=opt.get("label", ""),
                ))
            else:
                options.append(SelectOption(value=str(opt["value"]), label=opt.get("label", "")))
        return cls(
            type=kind,
            selector=data.get("selector", ""),
            name=data["name"],
            description=data.get("description", ""),
            required=bool(data.get("required", False)),
            default_value=data.get("defaultValue"),
            options=options,
            dynamic_options=bool(data.get("dynamicOptions", False)),
        )


FIELD_TYPES = frozenset({
    "text", "number", "textarea", "select", "checkbox", "radio", "date", "hidden",
})


# ---------------------------------------------------------------------------
# Action steps (closed set keyed by `action`)
# ---------------------------------------------------------------------------

@dataclass
class NavigateStep:
    url: str  # supports {{param}} templates


@dataclass
class ClickStep:
    selector: str
    pointer_events: bool = False  # full synthetic pointer sequence instead of native click


@dataclass
class FillStep:
    selector: str
    value: str


@dataclass
class SelectStep:
    selector: str
    value: str


@dataclass
class WaitStep:
    selector: str
    state: str = "visible"
    timeout: int | None = None  # ms


@dataclass
class ExtractStep:
    selector: str
    extract: str = "text"
    attribute: str | None = None


@dataclass
class ScrollStep:
    selector: str


@dataclass
class ConditionStep:
    selector: str
    state: str
    then: list["ActionStep"] = field(default_factory=list)
    otherwise: list["ActionStep"] | None = None  # "else" in JSON


@dataclass
class EvaluateStep:
    value: str  # async function body, supports {{param}} templates


ActionStep = Union[
    NavigateStep,
    ClickStep,
    FillStep,
    SelectStep,
    WaitStep,
    ExtractStep,
    ScrollStep,
    ConditionStep,
    EvaluateStep,
]

STEP_TYPES: dict[str, type] = {
    "navigate": NavigateStep,
    "click": ClickStep,
    "fill": FillStep,
    "select": SelectStep,
    "wait": WaitStep,
    "extract": ExtractStep,
    "scroll": ScrollStep,
    "condition": ConditionStep,
    "evaluate": EvaluateStep,
}


def _check_state(state: str) -> str:
    if state not in ELEMENT_STATES:
        raise ValueError(f"Unknown element state: {state!r}")
    return state


def parse_step(data: dict[str, Any]) -> ActionStep:
    """Build an ActionStep from its JSON form. Raises ValueError on unknown tags."""
    action = data.get("action", "")
    match action:
        case "navigate":
            return NavigateStep(url=data["url"])
        case "click":
            return ClickStep(
                selector=data["selector"],
                pointer_events=bool(data.get("pointerEvents", False)),
            )
        case "fill":
            return FillStep(selector=data["selector"], value=str(data.get("value", "")))
        case "select":
            return SelectStep(selector=data["selector"], value=str(data.get("value", "")))
        case "wait":
            return WaitStep(
                selector=data["selector"],
                state=_check_state(data.get("state") or "visible"),
                timeout=data.get("timeout"),
            )
        case "extract":
            mode = data.get("extract") or "text"
            if mode not in EXTRACT_MODES:
                raise ValueError(f"Unknown extract mode: {mode!r}")
            return ExtractStep(
                selector=data["selector"], extract=mode, attribute=data.get("attribute"),
            )
        case "scroll":
            return ScrollStep(selector=data["selector"])
        case "condition":
            otherwise = data.get("else")
            return ConditionStep(
                selector=data["selector"],
                state=_check_state(data.get("state") or "visible"),
                then=[parse_step(s) for s in data.get("then") or []],
                otherwise=[parse_step(s) for s in otherwise] if otherwise is not None else None,
            )
        case "evaluate":
            return EvaluateStep(value=data.get("value", ""))
        case _:
            raise ValueError(f"Unknown step action: {action!r}")


# ---------------------------------------------------------------------------
# Execution descriptor, tools, configs
# ---------------------------------------------------------------------------

@dataclass
class ExecutionDescriptor:
    """How to perform a tool: simple (fields + submit) or multi-step."""

    selector: str = ""
    fields: list[ToolField] = field(default_factory=list)
    autosubmit: bool = False
    submit_action: str = "click"  # click | enter
    submit_selector: str | None = None
    result_selector: str | None = None
    result_extract: str = "text"
    result_attribute: str | None = None
    steps: list[ActionStep] = field(default_factory=list)
    result_delay: int = 0  # ms
    result_wait_selector: str | None = None
    result_required: bool = False

    @property
    def is_multi_step(self) -> bool:
        return bool(self.steps)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExecutionDescriptor":
        return cls(
            selector=data.get("selector", ""),
            fields=[ToolField.from_dict(f) for f in data.get("fields") or []],
            autosubmit=bool(data.get("autosubmit", False)),
            submit_action=data.get("submitAction") or "click",
            submit_selector=data.get("submitSelector"),
            result_selector=data.get("resultSelector"),
            result_extract=data.get("resultExtract") or "text",
            result_attribute=data.get("resultAttribute"),
            steps=[parse_step(s) for s in data.get("steps") or []],
            result_delay=int(data.get("resultDelay") or 0),
            result_wait_selector=data.get("resultWaitSelector"),
            result_required=bool(data.get("resultRequired", False)),
        )


@dataclass
class ToolDescriptor:
    name: str
    description: str = ""
    input_schema: dict[str, Any] = field(default_factory=dict)
    annotations: dict[str, Any] | None = None
    execution: ExecutionDescriptor | None = None

    @property
    def is_executable(self) -> bool:
        return self.execution is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolDescriptor":
        execution = data.get("execution")
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            input_schema=data.get("inputSchema") or {},
            annotations=data.get("annotations"),
            execution=ExecutionDescriptor.from_dict(execution) if execution else None,
        )


@dataclass
class Config:
    """A hub record binding a domain/URL pattern to a set of tools."""

    id: str
    domain: str
    url_pattern: str = ""
    title: str = ""
    description: str = ""
    tools: list[ToolDescriptor] = field(default_factory=list)
    version: int = 1
    page_type: str | None = None
    contributor: str = ""
    created_at: str = ""
    updated_at: str = ""
    tags: list[str] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(
            id=str(data.get("id", "")),
            domain=data.get("domain", ""),
            url_pattern=data.get("urlPattern", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            tools=_parse_tools(data),
            version=int(data.get("version") or 1),
            page_type=data.get("pageType"),
            contributor=data.get("contributor", ""),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
            tags=list(data.get("tags") or []),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            return self.raw
        # Built in code rather than parsed; tool bodies are not re-serialized.
        return {
            "id": self.id,
            "domain": self.domain,
            "urlPattern": self.url_pattern,
            "title": self.title,
            "tools": [{"name": t.name, "description": t.description} for t in self.tools],
            "version": self.version,
        }


def _parse_tools(data: dict[str, Any]) -> list[ToolDescriptor]:
    """Parse a config's tools, dropping any the hub sent malformed."""
    tools: list[ToolDescriptor] = []
    for raw in data.get("tools") or []:
        try:
            tools.append(ToolDescriptor.from_dict(raw))
        except (ValueError, KeyError, TypeError) as e:
            name = raw.get("name", "?") if isinstance(raw, dict) else "?"
            print(f'[hub] Skipping tool "{name}" in config {data.get("id", "?")}: {e!r}')
    return tools
