"""Invoice template model edited by the template designer."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class TemplateStyle(str, Enum):
    PROFESSIONAL = "professional"
    MODERN = "modern"
    CLASSIC = "classic"
    ELEGANT = "elegant"


class InvoiceTemplate(BaseModel):
    """
    Visual settings of an invoice template.

    Mutable on purpose: the designer edits fields in place, and
    validate_assignment keeps every assignment (including those made by
    undo/redo closures) within the field constraints.
    """
    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    style: TemplateStyle = TemplateStyle.PROFESSIONAL

    primary_color: str = Field(default="#2C3E50", pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field(default="#7F8C8D", pattern=HEX_COLOR_PATTERN)
    accent_color: str = Field(default="#3498DB", pattern=HEX_COLOR_PATTERN)
    text_color: str = Field(default="#212121", pattern=HEX_COLOR_PATTERN)
    header_background: str = Field(default="#FFFFFF", pattern=HEX_COLOR_PATTERN)
    table_stripe_color: str = Field(default="#F5F7FA", pattern=HEX_COLOR_PATTERN)

    border_width: float = Field(default=1.0, ge=0.0, le=10.0)
    show_logo: bool = True
    footer_text: str = Field(default="Thank you for your business!", max_length=500)


# Color sets applied together when the user switches template style
STYLE_PRESETS: dict[TemplateStyle, dict[str, str]] = {
    TemplateStyle.PROFESSIONAL: {
        "primary_color": "#2C3E50",
        "secondary_color": "#7F8C8D",
        "accent_color": "#3498DB",
        "text_color": "#212121",
        "header_background": "#FFFFFF",
        "table_stripe_color": "#F5F7FA",
    },
    TemplateStyle.MODERN: {
        "primary_color": "#6C5CE7",
        "secondary_color": "#A29BFE",
        "accent_color": "#00CEC9",
        "text_color": "#2D3436",
        "header_background": "#F8F9FF",
        "table_stripe_color": "#F1F0FF",
    },
    TemplateStyle.CLASSIC: {
        "primary_color": "#000000",
        "secondary_color": "#555555",
        "accent_color": "#8B0000",
        "text_color": "#000000",
        "header_background": "#FFFFFF",
        "table_stripe_color": "#EEEEEE",
    },
    TemplateStyle.ELEGANT: {
        "primary_color": "#4A3728",
        "secondary_color": "#9C8A7B",
        "accent_color": "#C9A227",
        "text_color": "#333333",
        "header_background": "#FBF8F3",
        "table_stripe_color": "#F4EFE6",
    },
}
