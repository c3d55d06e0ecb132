# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

import os


log_dir = os.getenv("REPLFMT_LOG_DIR")
"""If not None, replfmt logs its activity to a file named replfmt-<pid>.log in
the specified directory, where <pid> is the return value of os.getpid().
"""
