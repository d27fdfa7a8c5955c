"""
Matrix factorizations.

LU and SVD result objects. Each is created fresh from a matrix by
LU.create / SVD.create.
"""

from pylinalg.factorization.lu import LU
from pylinalg.factorization.svd import SVD

__all__ = ["LU", "SVD"]
