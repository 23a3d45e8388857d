"""HOIST - GitOps boot configuration upgrader.

Keep a jx boot GitOps repository in step with its version stream and the boot configuration it derives from.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
