from prometheus_client import Counter, Histogram

# Layout generation (operator side)
LAYOUTS_GENERATED = Counter("busseats_layouts_generated_total", "Seat layout generation requests", ["result"])
LAYOUT_GENERATION_LATENCY = Histogram("busseats_layout_generation_seconds", "Time spent generating a seat layout")

# Normalization, labelled by which stored shape was found
LAYOUTS_NORMALIZED = Counter("busseats_layouts_normalized_total", "Seat layouts normalized", ["shape"])

# Rider seat toggles: selected, deselected, unavailable, full
SEAT_TOGGLES = Counter("busseats_seat_toggles_total", "Seat toggle requests", ["result"])
