"""Default card faces."""

FOOD_EMOJI: tuple[str, ...] = (
    "🍓", "🍉", "🍌", "🍏", "🥝", "🍇", "🍄", "🍋", "🥑", "🍆", "🌽",
    "🫑", "🥒", "🥬", "🥦", "🧄", "🫘", "🌰", "🫛", "🍄‍🟫", "🫓", "🧀",
    "🍖", "🍗", "🥩", "🍔", "🍟", "🍕", "🌮", "🌯", "🥙", "🧆", "🥚",
    "🍳", "🥘", "🍲", "🫕", "🥣", "🥗", "🍿", "🧈", "🧂", "🥫",
)
