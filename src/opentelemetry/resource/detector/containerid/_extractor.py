# Copyright The OpenTelemetry Authors
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

import logging
import re
from typing import Callable, Optional

from opentelemetry.resource.detector.containerid._filesystem import (
    FILESYSTEM,
    Filesystem,
)

logger = logging.getLogger(__name__)

# A 64 hex digit id, or an ECS task id (32 hex digits and a numeric suffix),
# optionally wrapped the way systemd names container scopes, e.g.
# docker-<id>.scope or cri-containerd-<id>.scope
CGROUP_SEGMENT_RE = re.compile(
    r"(?:(?:docker|cri-containerd|crio|libpod)-)?"
    r"([0-9a-f]{64}|[0-9a-f]{32}-[0-9]+)"
    r"(?:\.scope)?"
)


def match_path_segments(path: str, pattern: re.Pattern) -> Optional[str]:
    """Returns the first ``/``-separated segment of ``path`` that
    ``pattern`` fully matches, reduced to its first group.
    """
    for segment in path.split("/"):
        match = pattern.fullmatch(segment)
        if match:
            return match.group(1)
    return None


class ContainerIdExtractor:
    """Base for the strategies that look for a container id in one of the
    kernel's pseudo-files.

    Subclasses set ``source`` and implement ``extract_container_id``,
    usually by handing a path and a line parser to ``_extract_from``.
    """

    source = None

    def __init__(self, filesystem: Optional[Filesystem] = None):
        self._filesystem = filesystem or FILESYSTEM

    def extract_container_id(self) -> Optional[str]:
        raise NotImplementedError

    def _extract_from(
        self, path: str, parse_line: Callable[[str], Optional[str]]
    ) -> Optional[str]:
        if not self._filesystem.is_readable(path):
            return None
        try:
            with self._filesystem.lines(path) as lines:
                for line in lines:
                    container_id = parse_line(line)
                    if container_id:
                        logger.debug(
                            "Found container id %s in %s", container_id, path
                        )
                        return container_id
        # UnicodeDecodeError is a ValueError
        except (OSError, ValueError) as exception:
            logger.warning("Unable to read %s: %s", path, exception)
        return None
