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

from typing import Optional

from opentelemetry.resource.detector.containerid._extractor import (
    CGROUP_SEGMENT_RE,
    ContainerIdExtractor,
    match_path_segments,
)

DEFAULT_CGROUP_V2_PATH = "/proc/self/cgroup"
DEFAULT_MOUNTINFO_PATH = "/proc/self/mountinfo"

_UNIFIED_PREFIX = "0::"


def get_container_id_v2(line: str) -> Optional[str]:
    line = line.strip()
    if not line.startswith(_UNIFIED_PREFIX):
        return None
    return match_path_segments(line[len(_UNIFIED_PREFIX) :], CGROUP_SEGMENT_RE)


def get_container_id_from_mountinfo(line: str) -> Optional[str]:
    # Docker bind mounts /etc/hostname, /etc/hosts and /etc/resolv.conf
    # from <data-root>/containers/<id>/. Only the segment right after
    # "containers" counts: containerd mounts /etc/hostname from
    # sandboxes/<pod sandbox id>/, which is a different container.
    if "containers" not in line:
        return None
    for field in line.split():
        segments = field.split("/")
        for previous, segment in zip(segments, segments[1:]):
            if previous != "containers":
                continue
            match = CGROUP_SEGMENT_RE.fullmatch(segment)
            if match:
                return match.group(1)
    return None


class CgroupV2ContainerIdExtractor(ContainerIdExtractor):
    """Looks for the container id under the unified cgroup hierarchy.

    On a cgroup v2 host the ``0::`` line of /proc/self/cgroup carries the
    id when the runtime uses the systemd driver. With a private cgroup
    namespace that path is just ``/``, in which case the id is recovered
    from the mounts the runtime set up, listed in /proc/self/mountinfo.
    """

    source = "cgroup_v2"

    def extract_container_id(self) -> Optional[str]:
        return self._extract_from(
            DEFAULT_CGROUP_V2_PATH, get_container_id_v2
        ) or self._extract_from(
            DEFAULT_MOUNTINFO_PATH, get_container_id_from_mountinfo
        )
