"""gitcas - a content-addressable object store built on git's loose-object format.

gitcas stores blobs, trees and commits under the SHA-1 of their canonical
serialized form and builds hash-stable tree objects from directories.
"""

__version__ = "0.1.0"
__author__ = "gitcas Contributors"

__all__ = ["__version__", "__author__"]
