import random
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from typing_extensions import override

# worker count, bar length and rows stay compiled in
FILE_FIELDS = frozenset({"seed", "logging_conf_file"})


class RunFileSettingsSource(JsonConfigSettingsSource):
    @override
    def __call__(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in super().__call__().items()
            if key in FILE_FIELDS
        }


class DemoSettings(BaseSettings):
    worker_count: int = Field(default=5, gt=0)
    bar_length: int = Field(default=30, gt=0)
    seed: int = 0
    # row of worker 1 is base_row + 1
    base_row: int = Field(default=2, ge=0)
    logging_conf_file: str | None = "logging.json"

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        json_file=("progress_demo.json",),
    )

    @classmethod
    @override
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # the demo takes no environment variables
        return (
            init_settings,
            RunFileSettingsSource(settings_cls),
        )

    def rng_for(self, worker_id: int) -> random.Random:
        return random.Random(f"{self.seed}:{worker_id}")
