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
Unit tests for settings loading.
"""
import pytest
from pydantic import ValidationError

from hrimg.MODELS.container import DEFAULT_CONVENTIONS
from hrimg.UTILS.settings import load_settings


def test_defaults():
    settings = load_settings(environ={})
    assert settings.log_level == "WARNING"
    assert settings.conventions == DEFAULT_CONVENTIONS


def test_from_environment():
    settings = load_settings(environ={
        "HRIMG_RELEASE_CONTAINER_NAME": "release",
        "HRIMG_LOG_LEVEL": "debug",
        "UNRELATED": "x",
    })
    assert settings.conventions.release_container_name == "release"
    assert settings.log_level == "DEBUG"


def test_env_file_overrides_environment(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text('HRIMG_REPOSITORY_PREFIX="repo.example.com/"\nHRIMG_TAG_PREFIX=tag.example.com/\n')
    settings = load_settings(str(env_file), environ={"HRIMG_TAG_PREFIX": "ignored/"})
    assert settings.repository_prefix == "repo.example.com/"
    assert settings.tag_prefix == "tag.example.com/"


def test_empty_values_keep_defaults():
    settings = load_settings(environ={"HRIMG_TAG_PREFIX": ""})
    assert settings.tag_prefix == DEFAULT_CONVENTIONS.tag_prefix


def test_unknown_log_level():
    with pytest.raises(ValidationError):
        load_settings(environ={"HRIMG_LOG_LEVEL": "chatty"})
