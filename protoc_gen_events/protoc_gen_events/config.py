# Copyright 2026 TIER IV, inc.
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

"""Configuration management for the code generator."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .utils.logging_utils import DEFAULT_FORMAT, configure_split_stream_logging, level_from_name

ENV_PREFIX = "PROTOC_GEN_EVENTS_"


@dataclass
class CodegenConfig:
    """Runtime options of a generator run.

    The closure anchors (entry message, discriminator union) are not part of
    this configuration; they are constants of the resolver.
    """
    log_level: str = "INFO"
    print_level: str = "WARNING"
    cache_enabled: bool = True

    # paths
    output_dir: str = "build"

    @classmethod
    def from_env(cls) -> 'CodegenConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv(f'{ENV_PREFIX}LOG_LEVEL', 'INFO'),
            print_level=os.getenv(f'{ENV_PREFIX}PRINT_LEVEL', 'WARNING'),
            cache_enabled=os.getenv(f'{ENV_PREFIX}CACHE_ENABLED', 'true').lower() == 'true',
            output_dir=os.getenv(f'{ENV_PREFIX}OUTPUT_DIR', 'build'),
        )

    def set_logging(self, log_level: Optional[str] = None) -> logging.Logger:
        """Setup logging based on configuration.

        Args:
            log_level: Overrides the configured log level for this call only.
        """
        level = level_from_name(log_level or self.log_level, logging.INFO)
        stderr_level = level_from_name(self.print_level, logging.WARNING)

        formatter = logging.Formatter(DEFAULT_FORMAT)
        configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

        return logging.getLogger('protoc_gen_events')


# Global configuration instance
codegen_config = CodegenConfig.from_env()
