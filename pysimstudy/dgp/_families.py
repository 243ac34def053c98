"""
Parameter payloads and draw kernels for each distribution family.

Each family is a frozen payload plus three plain functions (draw, mean,
variance). DGPConfig binds the right kernel once at construction, so no
string dispatch happens per draw.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class NormalParams:
    mean: float
    sd: float


@dataclass(frozen=True)
class StudentTParams:
    df: float
    loc: float


@dataclass(frozen=True)
class ChiSquareParams:
    df: float
    center: bool


@dataclass(frozen=True)
class ParetoParams:
    shape: float
    scale: float


# --- draws ---

def draw_normal(p: NormalParams, n: int, rng: np.random.Generator) -> NDArray:
    return rng.normal(p.mean, p.sd, size=n)


def draw_student_t(p: StudentTParams, n: int, rng: np.random.Generator) -> NDArray:
    return p.loc + rng.standard_t(p.df, size=n)


def draw_chi_square(p: ChiSquareParams, n: int, rng: np.random.Generator) -> NDArray:
    x = rng.chisquare(p.df, size=n)
    if p.center:
        x -= p.df
    return x


def draw_pareto(p: ParetoParams, n: int, rng: np.random.Generator) -> NDArray:
    # numpy's pareto is the Lomax form; shift by one for support [scale, inf)
    return p.scale * (1.0 + rng.pareto(p.shape, size=n))


# --- population moments ---

def mean_normal(p: NormalParams) -> float:
    return p.mean


def var_normal(p: NormalParams) -> float:
    return p.sd ** 2


def mean_student_t(p: StudentTParams) -> float:
    return p.loc if p.df > 1.0 else math.nan


def var_student_t(p: StudentTParams) -> float:
    if p.df > 2.0:
        return p.df / (p.df - 2.0)
    if p.df > 1.0:
        return math.inf
    return math.nan


def mean_chi_square(p: ChiSquareParams) -> float:
    return 0.0 if p.center else p.df


def var_chi_square(p: ChiSquareParams) -> float:
    return 2.0 * p.df


def mean_pareto(p: ParetoParams) -> float:
    if p.shape > 1.0:
        return p.shape * p.scale / (p.shape - 1.0)
    return math.inf


def var_pareto(p: ParetoParams) -> float:
    if p.shape > 2.0:
        a = p.shape
        return p.scale ** 2 * a / ((a - 1.0) ** 2 * (a - 2.0))
    return math.inf


# --- labels ---

def _fmt(x: float) -> str:
    return f"{x:g}"


def label_normal(p: NormalParams) -> str:
    return f"N({_fmt(p.mean)}, {_fmt(p.sd ** 2)})"


def label_student_t(p: StudentTParams) -> str:
    base = "Cauchy" if p.df == 1.0 else f"t({_fmt(p.df)})"
    return base if p.loc == 0.0 else f"{base} + {_fmt(p.loc)}"


def label_chi_square(p: ChiSquareParams) -> str:
    base = f"chi2({_fmt(p.df)})"
    return f"{base} centered" if p.center else base


def label_pareto(p: ParetoParams) -> str:
    if p.scale == 1.0:
        return f"Pareto({_fmt(p.shape)})"
    return f"Pareto({_fmt(p.shape)}, scale={_fmt(p.scale)})"
