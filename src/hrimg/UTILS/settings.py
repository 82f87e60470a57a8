# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Settings read from the environment and optional .env files.
"""
import logging
import os
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, field_validator

from ..MODELS.container import (
    ImageConventions,
    ImageRepositoryPrefix,
    ImageTagPrefix,
    ReleaseContainerName,
)

ENV_PREFIX = "HRIMG_"

# field name -> environment variable
ENV_KEYS: Dict[str, str] = {
    "release_container_name": ENV_PREFIX + "RELEASE_CONTAINER_NAME",
    "repository_prefix": ENV_PREFIX + "REPOSITORY_PREFIX",
    "tag_prefix": ENV_PREFIX + "TAG_PREFIX",
    "log_level": ENV_PREFIX + "LOG_LEVEL",
}


class Settings(BaseModel):
    """
    Runtime settings. Defaults are the stable naming contract.
    """
    release_container_name: str = ReleaseContainerName
    repository_prefix: str = ImageRepositoryPrefix
    tag_prefix: str = ImageTagPrefix
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @property
    def conventions(self) -> ImageConventions:
        return ImageConventions(
            release_container_name=self.release_container_name,
            repository_prefix=self.repository_prefix,
            tag_prefix=self.tag_prefix,
        )


def load_settings(env_file: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Loads settings from the process environment, overridden by an .env file.

    :param env_file: Optional path to a .env file.
    :param environ: Environment to read instead of os.environ.
    :return: The settings.
    """
    merged: Dict[str, Optional[str]] = dict(os.environ if environ is None else environ)
    if env_file:
        merged.update(dotenv_values(env_file))

    values = {field: merged[key] for field, key in ENV_KEYS.items() if merged.get(key)}
    return Settings(**values)
