"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from sheafy.domain.config.sheafy import SheafyConfig


class AppConfig(BaseModel):
    """Main application configuration.

    This is the root configuration model. It is validated once at load time
    and is immutable afterwards.

    Attributes:
        sheafy: Bundle and restore settings
    """

    sheafy: SheafyConfig = Field(default_factory=SheafyConfig)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "sheafy": {
                    "bundle_name": "project_bundle.md",
                    "working_dir": ".",
                    "use_gitignore": True,
                    "ignore_patterns": "*.log\n!important.log\nbuild/\n",
                    "filters": ["py", "md"],
                    "include_hidden": False,
                    "prologue": "# My project",
                    "epilogue": None,
                },
            }
        },
    )
