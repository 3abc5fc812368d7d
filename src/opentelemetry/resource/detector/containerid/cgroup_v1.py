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

import re
from typing import Optional

from opentelemetry.resource.detector.containerid._extractor import (
    CGROUP_SEGMENT_RE,
    ContainerIdExtractor,
    match_path_segments,
)

DEFAULT_CGROUP_V1_PATH = "/proc/self/cgroup"

# <hierarchy id>:<controller,controller,...>:<cgroup path>
_CGROUP_LINE_RE = re.compile(r"^(\d+):([^:]*):(.+)$")


def get_container_id_v1(line: str) -> Optional[str]:
    match = _CGROUP_LINE_RE.match(line.strip())
    if not match:
        return None
    hierarchy_id, controllers, path = match.groups()
    # 0::<path> is the unified hierarchy, left to the v2 extractor
    if hierarchy_id == "0" and not controllers:
        return None
    return match_path_segments(path, CGROUP_SEGMENT_RE)


class CgroupV1ContainerIdExtractor(ContainerIdExtractor):
    source = "cgroup_v1"

    def extract_container_id(self) -> Optional[str]:
        return self._extract_from(DEFAULT_CGROUP_V1_PATH, get_container_id_v1)
