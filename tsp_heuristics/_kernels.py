import numpy as np
from numba import njit


# ==============================================================================
# Numba-accelerated kernels
# Tours are int64 arrays of distance-matrix indices (node id minus the table
# base). Kernels only reverse segments; swapping two neighbours counts as a
# two-node reversal.
# ==============================================================================

# Reconnection codes, see three_opt.Reconnection
SEGMENT_SWAP = 0
SWAP_REVERSE_FIRST = 1
SWAP_REVERSE_SECOND = 2
REVERSE_BOTH = 3
REVERSE_FIRST = 4
REVERSE_SECOND = 5
REVERSE_SPAN = 6


@njit(cache=True)
def tour_length(tour: np.ndarray, dist: np.ndarray) -> float:
    """Total length of the cycle, closing edge included."""
    n = tour.shape[0]
    if n < 2:
        return 0.0
    total = 0.0
    for i in range(n):
        total += dist[tour[i], tour[(i + 1) % n]]
    return total


@njit(cache=True)
def reverse_segment(tour: np.ndarray, a: int, b: int):
    """In-place reversal of tour[a..b] (closed range, a <= b, no wrap)."""
    while a < b:
        tmp = tour[a]
        tour[a] = tour[b]
        tour[b] = tmp
        a += 1
        b -= 1


@njit(cache=True)
def two_opt(tour, dist, closed, max_passes, tolerance):
    """
    First-improvement 2-opt to a fixed point.

    Edge i joins tour[i] and tour[(i + 1) % n]. With closed=False the closing
    edge is never broken.

    Returns:
        (moves, passes, converged)
    """
    n = tour.shape[0]
    last = n if closed else n - 1
    moves = 0
    passes = 0
    modified = True
    while modified and passes < max_passes:
        modified = False
        passes += 1
        for i in range(last - 2):
            for j in range(i + 2, last):
                # edges (n-1, 0) and (0, 1) share tour[0]
                if i == 0 and j == n - 1:
                    continue
                a = tour[i]
                b = tour[i + 1]
                c = tour[j]
                d = tour[(j + 1) % n]
                d1 = dist[a, b] + dist[c, d]
                d2 = dist[a, c] + dist[b, d]
                if d2 < d1 - tolerance:
                    reverse_segment(tour, i + 1, j)
                    modified = True
                    moves += 1
    return moves, passes, not modified


@njit(cache=True)
def _three_opt_added(code, dist, a, b, c, d, e, f):
    """Length of the edges a reconnection adds, plus the kept edge for 2-edge moves."""
    if code == SEGMENT_SWAP:
        return dist[a, d] + dist[e, b] + dist[c, f]
    elif code == SWAP_REVERSE_FIRST:
        return dist[a, d] + dist[e, c] + dist[b, f]
    elif code == SWAP_REVERSE_SECOND:
        return dist[a, e] + dist[d, b] + dist[c, f]
    elif code == REVERSE_BOTH:
        return dist[a, c] + dist[b, e] + dist[d, f]
    elif code == REVERSE_FIRST:
        return dist[a, c] + dist[b, d] + dist[e, f]
    elif code == REVERSE_SECOND:
        return dist[a, b] + dist[c, e] + dist[d, f]
    else:
        return dist[a, e] + dist[c, d] + dist[b, f]


@njit(cache=True)
def _three_opt_apply(code, tour, i, j, k):
    # B = tour[i+1..j], C = tour[j+1..k]
    if code == REVERSE_FIRST:
        reverse_segment(tour, i + 1, j)
    elif code == REVERSE_SECOND:
        reverse_segment(tour, j + 1, k)
    elif code == REVERSE_BOTH:
        reverse_segment(tour, i + 1, j)
        reverse_segment(tour, j + 1, k)
    else:
        # A C' B' D, C' now occupies tour[i+1..i+len(C)]
        reverse_segment(tour, i + 1, k)
        split = i + (k - j)
        if code == SEGMENT_SWAP or code == SWAP_REVERSE_FIRST:
            reverse_segment(tour, i + 1, split)
        if code == SEGMENT_SWAP or code == SWAP_REVERSE_SECOND:
            reverse_segment(tour, split + 1, k)


@njit(cache=True)
def three_opt(tour, dist, codes, closed, max_passes, tolerance):
    """
    First-improvement 3-opt over the given reconnection codes.

    Returns:
        (moves, passes, converged)
    """
    n = tour.shape[0]
    last = n if closed else n - 1
    moves = 0
    passes = 0
    modified = True
    while modified and passes < max_passes:
        modified = False
        passes += 1
        for i in range(last - 4):
            for j in range(i + 2, last - 2):
                for k in range(j + 2, last):
                    if i == 0 and k == n - 1:
                        continue
                    a = tour[i]
                    b = tour[i + 1]
                    c = tour[j]
                    d = tour[j + 1]
                    e = tour[k]
                    f = tour[(k + 1) % n]
                    removed = dist[a, b] + dist[c, d] + dist[e, f]
                    for m in range(codes.shape[0]):
                        added = _three_opt_added(codes[m], dist, a, b, c, d, e, f)
                        if added < removed - tolerance:
                            _three_opt_apply(codes[m], tour, i, j, k)
                            modified = True
                            moves += 1
                            break
    return moves, passes, not modified


@njit(cache=True)
def gated_two_opt(tour, dist, affinity, threshold, closed, max_passes, tolerance):
    """
    2-opt where an improving move also needs affinity[a, c] + affinity[b, d] > md.

    md starts every pass at threshold and falls to zero for the rest of the
    pass as soon as a full scan for some i accepts nothing.

    Returns:
        (moves, passes, converged)
    """
    n = tour.shape[0]
    last = n if closed else n - 1
    moves = 0
    passes = 0
    modified = True
    while modified and passes < max_passes:
        modified = False
        passes += 1
        md = threshold
        for i in range(last - 2):
            while True:
                found = False
                for j in range(i + 2, last):
                    if i == 0 and j == n - 1:
                        continue
                    a = tour[i]
                    b = tour[i + 1]
                    c = tour[j]
                    d = tour[(j + 1) % n]
                    d1 = dist[a, b] + dist[c, d]
                    d2 = dist[a, c] + dist[b, d]
                    if d2 < d1 - tolerance and affinity[a, c] + affinity[b, d] > md:
                        reverse_segment(tour, i + 1, j)
                        found = True
                        modified = True
                        moves += 1
                if found or md == 0.0:
                    break
                md = 0.0
    return moves, passes, not modified


@njit(cache=True)
def nearest_extension(tour, dist):
    """
    Keep tour[0] and tour[1]; fill every later position with the nearest
    remaining node to its predecessor (first strict minimum wins).

    Returns:
        number of positions that changed occupant
    """
    n = tour.shape[0]
    moves = 0
    for i in range(2, n):
        prev = tour[i - 1]
        best = i
        best_dist = dist[prev, tour[i]]
        for j in range(i + 1, n):
            d = dist[prev, tour[j]]
            if d < best_dist:
                best_dist = d
                best = j
        if best != i:
            reverse_segment(tour, i, best)
            moves += 1
    return moves


@njit(cache=True)
def adjacent_swap_pass(tour, dist):
    """
    One forward pass swapping tour[i+1] and tour[i+2] (cyclic) whenever
    tour[i+2] is closer to tour[i] than tour[i+1] is.

    Returns:
        number of swaps
    """
    n = tour.shape[0]
    moves = 0
    for i in range(n - 1):
        a = tour[i]
        p = (i + 1) % n
        q = (i + 2) % n
        if dist[a, tour[q]] < dist[a, tour[p]]:
            tmp = tour[p]
            tour[p] = tour[q]
            tour[q] = tmp
            moves += 1
    return moves
