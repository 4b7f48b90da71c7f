# -*- encoding: utf-8 -*-
#
# The MIT License (MIT)
#
# Copyright © 2021 Maurizio Tomasi
#
# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the “Software”), to deal in the Software without restriction, including without limitation the
# rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software. THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT
# LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT
# SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF
# CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.


from typing import List


class UnsupportedOperationError(Exception):
    """The requested operation is not available for this kind of generator

    This is a configuration-time limitation (e.g., trying to save a generator
    whose stream cannot be reconstructed), not a runtime fault."""

    def __init__(self, error_message):
        super().__init__(error_message)


class CompatibilityError(Exception):
    """A serialized generator does not match the type it is being restored into

    The field `fields` lists the names of the :class:`.Definition` fields that
    differ, while `expected` and `found` hold the two definitions."""

    def __init__(self, fields: List[str], expected=None, found=None):
        self.fields = fields
        self.expected = expected
        self.found = found

        details = ", ".join(
            f"{name} (expected {getattr(expected, name, '?')}, found {getattr(found, name, '?')})" for name in fields
        )
        super().__init__(f"incompatible generator definition: {details}")


class InvalidPcgData(Exception):
    """Malformed serialized generator data"""

    def __init__(self, error_message):
        super().__init__(error_message)
