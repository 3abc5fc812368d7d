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

import os
from contextlib import contextmanager
from typing import Iterator


class Filesystem:
    """Read-only access to the pseudo-files container ids are found in.

    Extractors only go through this class so tests can hand them an
    in-memory replacement.
    """

    def is_readable(self, path: str) -> bool:
        try:
            return os.path.isfile(path) and os.access(path, os.R_OK)
        except (OSError, ValueError):
            return False

    @contextmanager
    def lines(self, path: str) -> Iterator[Iterator[str]]:
        """Yields a lazy iterator over the lines of path.

        The file stays open until the with block exits, whether the
        iterator was exhausted, abandoned or raised.
        """
        with open(path, encoding="utf8") as pseudo_file:
            yield (line.rstrip("\n") for line in pseudo_file)


FILESYSTEM = Filesystem()
