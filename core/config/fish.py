"""Fish rarity, size and roster tables.

Rarity rows: (name, value multiplier, spawn chance, QTE seconds per
challenge, QTE challenges required, display color). Chances sum to 1.0.
"""

RARITY_TABLE = (
    ("Common", 1.0, 0.494, 1.5, 3, "#95a5a6"),
    ("Uncommon", 1.5, 0.30, 1.25, 4, "#2ecc71"),
    ("Rare", 2.5, 0.15, 1.0, 5, "#3498db"),
    ("Epic", 4.0, 0.04, 0.9, 6, "#9b59b6"),
    ("Legendary", 7.0, 0.01, 0.9, 10, "#f39c12"),
    ("Mythical", 12.0, 0.005, 0.9, 20, "#e74c3c"),
    ("Universal", 20.0, 0.001, 0.9, 50, "#ff00ff"),
)

# (name, value multiplier, chance); chances sum to 1.0
SIZE_TABLE = (
    ("Tiny", 0.5, 0.30),
    ("Small", 0.75, 0.25),
    ("Medium", 1.0, 0.25),
    ("Large", 1.5, 0.15),
    ("Huge", 2.5, 0.05),
)

# Chance that an active event swaps the rolled fish for one of its specials
EVENT_SPECIAL_FISH_CHANCE = 0.3

# (name, base value, color, design style) per rarity
FISH_ROSTER = {
    "Common": (
        ("Glowfin", 10, "#ffff00", "glow"),
        ("Sunny Bass", 12, "#ffd700", "default"),
        ("Blue Minnow", 8, "#4169e1", "default"),
        ("Green Guppy", 9, "#32cd32", "default"),
        ("Red Snapper", 11, "#ff6347", "default"),
        ("Silver Scale", 10, "#c0c0c0", "default"),
        ("Pink Puffer", 8, "#ff69b4", "glow"),
        ("Teal Trout", 10, "#008080", "default"),
    ),
    "Uncommon": (
        ("Crystal Scale", 15, "#00ffff", "ice"),
        ("Shimmer Shad", 18, "#87ceeb", "glow"),
        ("Sparkle Sprat", 16, "#ffd700", "glow"),
        ("Flash Flounder", 18, "#ffff99", "electric"),
        ("Gleam Gar", 17, "#b0e0e6", "ice"),
        ("Radiance Ray", 19, "#ffefd5", "glow"),
        ("Polish Perch", 18, "#dda0dd", "ice"),
        ("Shine Snapper", 19, "#fafad2", "glow"),
    ),
    "Rare": (
        ("Fire Gills", 25, "#ff4500", "fire"),
        ("Ice Fin", 22, "#87ceeb", "ice"),
        ("Thunder Trout", 24, "#9370db", "electric"),
        ("Storm Striper", 23, "#4b0082", "electric"),
        ("Blaze Bass", 26, "#ff6347", "fire"),
        ("Glacier Gar", 21, "#e0f6ff", "ice"),
        ("Ember Eel", 24, "#ff8c00", "fire"),
        ("Lightning Ling", 26, "#ffff00", "electric"),
    ),
    "Epic": (
        ("Shadow Serpent", 35, "#800080", "shadow"),
        ("Phantom Pike", 32, "#2f4f4f", "shadow"),
        ("Mystic Ray", 38, "#ff1493", "glow"),
        ("Cosmic Carp", 40, "#4b0082", "electric"),
        ("Ethereal Eel", 36, "#da70d6", "shadow"),
        ("Astral Angler", 39, "#8a2be2", "electric"),
        ("Ghost Gar", 35, "#696969", "shadow"),
        ("Aurora Angelfish", 40, "#ff1493", "glow"),
    ),
    "Legendary": (
        ("Dragon Fin", 50, "#ff6347", "fire"),
        ("Celestial Bass", 55, "#00ced1", "electric"),
        ("Starfish", 52, "#ffd700", "glow"),
        ("Titan Tuna", 60, "#ff8c00", "fire"),
        ("Prismatic Perch", 58, "#ff1493", "glow"),
        ("Leviathan Ling", 56, "#191970", "shadow"),
        ("Phoenix Pike", 54, "#ff4500", "fire"),
        ("Kraken Koi", 59, "#4b0082", "shadow"),
    ),
    "Mythical": (
        ("Void Eel", 80, "#191970", "shadow"),
        ("Ethereal Angelfish", 85, "#da70d6", "glow"),
        ("Chronos Carp", 88, "#4b0082", "electric"),
        ("Chaos Cod", 82, "#800080", "shadow"),
        ("Abyssal Angler", 90, "#000033", "shadow"),
        ("Paradise Pike", 84, "#ffd700", "fire"),
        ("Olympus Oarfish", 91, "#ff8c00", "fire"),
        ("Sacred Snapper", 91, "#ffd700", "fire"),
    ),
    "Universal": (
        ("Godfish", 150, "#ff00ff", "glow"),
        ("Omnipotent Oarfish", 180, "#ff1493", "electric"),
        ("Alpha Angler", 160, "#ff00ff", "fire"),
        ("Omega Oarfish", 175, "#9370db", "electric"),
        ("Infinity Ide", 170, "#ff00ff", "glow"),
        ("Master Mackerel", 190, "#ff1493", "electric"),
        ("Crown Cod", 195, "#ff1493", "electric"),
        ("Apotheosis Angelfish", 200, "#ff00ff", "glow"),
    ),
}

# Time-of-day events: phase -> (name, description, special fish, value multiplier)
SYNCHRONOUS_EVENT_TABLE = {
    "morning": (
        "Dawn Fishing",
        "Special fish appear during morning hours!",
        ("Glowfin", "Crystal Scale"),
        1.2,
    ),
    "noon": (
        "Midday Bounty",
        "Increased chance of rare fish!",
        ("Fire Gills", "Thunder Trout"),
        1.5,
    ),
    "afternoon": (
        "Afternoon Delight",
        "Epic fish are more common!",
        ("Dragon Fin", "Celestial Bass"),
        1.3,
    ),
    "night": (
        "Midnight Mystery",
        "Legendary fish emerge from the depths!",
        ("Shadow Serpent", "Void Eel", "Phantom Pike"),
        2.0,
    ),
}
