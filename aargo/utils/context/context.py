#
# Copyright 2024 aargo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

import os


# This context data class to save the context of the command
class CliContext:
    def __init__(self):
        self.home_path = os.getcwd()
        self.config_file = None
