"""
Enumerations for import-shaker.

This module defines the import shapes recognised by the binding registry and
the result kinds a resolution policy may return.
"""

from enum import Enum


class ImportType(str, Enum):
  """
  The shape of the import statement that bound a local name.

  Values match the strings handed to resolution policies.
  """

  NAMED = "named"  # from m import x [as y]
  DEFAULT = "default"  # import m as y
  WILDCARD = "wildcard"  # import m


class ResolutionKind(str, Enum):
  """
  Kinds of direct import a policy can ask for.
  """

  NAMED = "named"  # from path import name as alias
  DEFAULT = "default"  # import path as alias
