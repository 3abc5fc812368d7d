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

"""
Detects the id of the container the process runs in and exposes it as the
``container.id`` resource attribute.

Three sources are tried in order, the first one yielding an id wins:

* the cgroup path ECS writes for process 1 (``/proc/1/cpuset``)
* a cgroup v1 hierarchy in ``/proc/self/cgroup``
* the cgroup v2 unified hierarchy in ``/proc/self/cgroup``, then
  ``/proc/self/mountinfo``

Usage
-----

.. code-block:: python

    from opentelemetry.resource.detector.containerid import (
        ContainerResourceDetector,
    )
    from opentelemetry.sdk.resources import get_aggregated_resources
    from opentelemetry.sdk.trace import TracerProvider

    resource = get_aggregated_resources([ContainerResourceDetector()])
    tracer_provider = TracerProvider(resource=resource)

The detector is also registered as ``containerid`` for
``OTEL_EXPERIMENTAL_RESOURCE_DETECTORS``.
"""

import logging
import threading
from typing import NamedTuple, Optional

from opentelemetry.resource.detector.containerid._filesystem import (
    FILESYSTEM,
    Filesystem,
)
from opentelemetry.resource.detector.containerid.cgroup_v1 import (
    CgroupV1ContainerIdExtractor,
)
from opentelemetry.resource.detector.containerid.cgroup_v2 import (
    CgroupV2ContainerIdExtractor,
)
from opentelemetry.resource.detector.containerid.ecs import (
    EcsContainerIdExtractor,
)
from opentelemetry.sdk.resources import Resource, ResourceDetector
from opentelemetry.semconv.resource import ResourceAttributes

logger = logging.getLogger(__name__)

__all__ = [
    "ContainerResource",
    "ContainerResourceDetector",
    "ResolvedContainerId",
    "get",
]


class ResolvedContainerId(NamedTuple):
    container_id: str
    source: str


class ContainerResource:
    """Resolves the container id once and keeps the resulting ``Resource``
    for the lifetime of the object.
    """

    def __init__(
        self,
        ecs_extractor: Optional[EcsContainerIdExtractor] = None,
        v1_extractor: Optional[CgroupV1ContainerIdExtractor] = None,
        v2_extractor: Optional[CgroupV2ContainerIdExtractor] = None,
        filesystem: Optional[Filesystem] = None,
    ):
        filesystem = filesystem or FILESYSTEM
        self._extractors = (
            ecs_extractor or EcsContainerIdExtractor(filesystem),
            v1_extractor or CgroupV1ContainerIdExtractor(filesystem),
            v2_extractor or CgroupV2ContainerIdExtractor(filesystem),
        )
        self._lock = threading.Lock()
        self._resource = None

    def resolve(self) -> Optional[ResolvedContainerId]:
        for extractor in self._extractors:
            container_id = extractor.extract_container_id()
            if container_id:
                return ResolvedContainerId(container_id, extractor.source)
        return None

    def build_resource(self) -> Resource:
        try:
            resolved = self.resolve()
        # pylint: disable=broad-except
        except Exception as exception:
            logger.warning("Failed to resolve container id: %s", exception)
            return Resource.get_empty()

        if resolved is None:
            logger.info("No container id found")
            return Resource.get_empty()

        logger.info(
            "container.id resource attribute set to %s from %s",
            resolved.container_id,
            resolved.source,
        )
        return Resource(
            {ResourceAttributes.CONTAINER_ID: resolved.container_id}
        )

    def get_resource(self) -> Resource:
        if self._resource is None:
            with self._lock:
                if self._resource is None:
                    self._resource = self.build_resource()
        return self._resource


_CONTAINER_RESOURCE = None
_CONTAINER_RESOURCE_LOCK = threading.Lock()


def _get_container_resource() -> ContainerResource:
    global _CONTAINER_RESOURCE  # pylint: disable=global-statement
    if _CONTAINER_RESOURCE is None:
        with _CONTAINER_RESOURCE_LOCK:
            if _CONTAINER_RESOURCE is None:
                _CONTAINER_RESOURCE = ContainerResource()
    return _CONTAINER_RESOURCE


def get() -> Resource:
    """Returns the process-wide resource with the container id, if any."""
    return _get_container_resource().get_resource()


class ContainerResourceDetector(ResourceDetector):
    """Detects container.id, only available when the app is running inside a
    container, and returns it in a Resource.
    """

    def __init__(
        self,
        raise_on_error: bool = False,
        container_resource: Optional[ContainerResource] = None,
    ):
        super().__init__(raise_on_error=raise_on_error)
        self._container_resource = container_resource

    def detect(self) -> "Resource":
        try:
            if self._container_resource is None:
                return get()
            return self._container_resource.get_resource()

        # pylint: disable=broad-except
        except Exception as exception:
            logger.warning(
                "%s Resource Detection failed silently: %s",
                self.__class__.__name__,
                exception,
            )
            if self.raise_on_error:
                raise exception
            return Resource.get_empty()
