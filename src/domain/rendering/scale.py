"""Linear scale shared by the rating graph and the heatmap."""


def map_linear(
    value: float,
    domain_min: float,
    domain_max: float,
    range_min: float,
    range_max: float,
) -> float:
    """Map value from [domain_min, domain_max] onto [range_min, range_max].

    The range may be inverted (range_min > range_max), which is how the
    rating axis puts larger ratings higher on the canvas. A degenerate domain
    (single data point, or all values equal) maps to the middle of the range.
    """
    if domain_max == domain_min:
        return (range_min + range_max) / 2
    ratio = (value - domain_min) / (domain_max - domain_min)
    return range_min + ratio * (range_max - range_min)
