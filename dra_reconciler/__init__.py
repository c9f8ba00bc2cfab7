# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Reconciler for Amazon FSx data repository associations.

Drives create, read, update, delete and list of a single data repository
association through its asynchronous lifecycle, with resumable progress.
"""

__version__ = "0.1.0"
