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

from .models.descriptors import MessageDescriptor


def event_field_check(msg: MessageDescriptor, field: str) -> bool:
    """Return True if the event declares a field with the given name."""
    return msg.field_by_name(field) is not None


def is_process_event(msg: MessageDescriptor) -> bool:
    """Return True if the message is an event that carries a process field."""
    return event_field_check(msg, "process")


def is_parent_event(msg: MessageDescriptor) -> bool:
    """Return True if the message is an event that carries a parent field."""
    return event_field_check(msg, "parent")
