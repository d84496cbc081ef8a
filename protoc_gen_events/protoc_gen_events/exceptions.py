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

"""Custom exceptions for the protoc-gen-events code generator."""


class CodegenError(Exception):
    """Base exception for code-generator related errors."""
    pass


class SchemaShapeError(CodegenError):
    """Exception raised when a structural anchor of the schema unit is missing."""
    pass


class EntryNotFoundError(SchemaShapeError):
    """Exception raised when the entry message is absent from the schema unit."""
    pass


class UnionNotFoundError(SchemaShapeError):
    """Exception raised when the entry message lacks the event discriminator union."""
    pass


class SchemaLoadError(CodegenError):
    """Exception raised when a schema unit file cannot be read or is malformed."""
    pass


class GenerationError(CodegenError):
    """Exception raised when rendering or writing generated files fails."""
    pass
