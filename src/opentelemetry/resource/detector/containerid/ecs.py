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
    ContainerIdExtractor,
    match_path_segments,
)

# Present in every Amazon ECS container, on Fargate as well as on EC2
ECS_CGROUP_PATH = "/proc/1/cpuset"

# Fargate: [0-9a-f]{32}-[0-9]+, EC2: [0-9a-f]{64}
ECS_CONTAINER_ID_RE = re.compile(r"([0-9a-f]{32}-[0-9]+|[0-9a-f]{64})")


def get_ecs_container_id(line: str) -> Optional[str]:
    return match_path_segments(line.strip(), ECS_CONTAINER_ID_RE)


class EcsContainerIdExtractor(ContainerIdExtractor):
    """Reads the container id the ECS agent leaves in the cgroup path of
    process 1.
    """

    source = "ecs"

    def extract_container_id(self) -> Optional[str]:
        return self._extract_from(ECS_CGROUP_PATH, get_ecs_container_id)
