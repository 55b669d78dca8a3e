"""Fixed expected-odds formulas.

These are hand-tuned regression constants and closed-form approximations,
not fitted here. Keep the arithmetic exactly as written; downstream alert
thresholds were calibrated against these outputs.
"""

import math

# Expected place = 0.9458 + 0.1923 * win
PLACE_INTERCEPT = 0.9458
PLACE_SLOPE = 0.1923

# Expected quinella = 6.44 + 0.415 * win1 * win2
QUINELLA_INTERCEPT = 6.44
QUINELLA_SLOPE = 0.415
QUINELLA_STANDARD_ERROR = 23.68

PQ_TAKEOUT = 0.20
QUINELLA_TAKEOUT = 0.175
QUINELLA_GAMMA = 0.85


def expected_place_odds(win: float) -> float:
    return PLACE_INTERCEPT + PLACE_SLOPE * win


def expected_quinella_odds(win_1: float, win_2: float) -> float:
    return QUINELLA_INTERCEPT + QUINELLA_SLOPE * (win_1 * win_2)


def standardised_residual(residual: float) -> float:
    """Quinella residual in units of the regression's standard error."""
    return residual / QUINELLA_STANDARD_ERROR


def fair_pq_odds_hk(hk_odds_a: float, hk_odds_b: float, takeout: float = PQ_TAKEOUT) -> float:
    """Fair place-quinella odds for two horses from their HK win odds.

    Win odds are turned into implied win probabilities (odds + 1 as decimal),
    top-3 chances are approximated as 1 - (1 - p)^3, a Stern-style
    conditional gives the chance of one placing given the other placed, the
    two orderings are averaged, and the takeout is applied.

    Raises ValueError for non-positive odds.
    """
    if hk_odds_a <= 0 or hk_odds_b <= 0:
        raise ValueError(f"Win odds must be positive, got {hk_odds_a} and {hk_odds_b}")

    p_a = 1 / (hk_odds_a + 1)
    p_b = 1 / (hk_odds_b + 1)

    p_a_top3 = 1 - math.pow(1 - p_a, 3)
    p_b_top3 = 1 - math.pow(1 - p_b, 3)

    p_b_given_a = 1 - math.pow(1 - (p_b / (1 - p_a)), 2)
    p_a_given_b = 1 - math.pow(1 - (p_a / (1 - p_b)), 2)

    qp_prob = 0.5 * (p_a_top3 * p_b_given_a + p_b_top3 * p_a_given_b)
    return (1 - takeout) / qp_prob


def fair_quinella_odds_hk(
    hk_odds_a: float,
    hk_odds_b: float,
    gamma: float = QUINELLA_GAMMA,
    takeout: float = QUINELLA_TAKEOUT,
) -> float:
    """Stern-model fair quinella odds for two horses (reporting only).

    Raises ValueError for non-positive odds.
    """
    if hk_odds_a <= 0 or hk_odds_b <= 0:
        raise ValueError(f"Win odds must be positive, got {hk_odds_a} and {hk_odds_b}")

    p_1 = 1 / (hk_odds_a + 1)
    p_2 = 1 / (hk_odds_b + 1)

    # Normalise the pair's probabilities to sum to 1
    total = p_1 + p_2
    p_1_adj = p_1 / total
    p_2_adj = p_2 / total

    term_1 = p_1_adj * (math.pow(p_2_adj, gamma) / math.pow(1 - p_1_adj, gamma))
    term_2 = p_2_adj * (math.pow(p_1_adj, gamma) / math.pow(1 - p_2_adj, gamma))
    return (1 - takeout) / (term_1 + term_2)
