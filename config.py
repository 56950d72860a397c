"""Configuration constants for the Challenge Sprint bot."""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Runtime settings
TICK_SECONDS = float(os.getenv("TICK_SECONDS", "1.0"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Countdown bounds (ticks); 0 disables the countdown
MIN_COUNTDOWN_TICKS = 2
MAX_COUNTDOWN_TICKS = 5

# Streak thresholds (streak: multiplier)
MULTIPLIER_TIERS = {
    10: 2,
    20: 3,
    30: 4,
    50: 5
}

# Speed clicker
CLICKER_DURATION_TICKS = 10
CLICKER_COUNTDOWN_TICKS = 3

# Memory chain
MEMORY_LIVES = 3
MEMORY_START_LENGTH = 3
MEMORY_MAX_LENGTH = 15
MEMORY_BASE_STEP_TICKS = 19  # 20 - level
MEMORY_MIN_STEP_TICKS = 10
MEMORY_ELEMENTS_PER_TICK = 2
MEMORY_FEEDBACK_TICKS = 2

# Word blitz
WORD_DURATION_TICKS = 60
WORD_STEP_TICKS = 5
WORD_CHARS_PER_TICK = 4
# Completed words (history length) needed to reach each tier
WORD_TIER_THRESHOLDS = {
    'common': 0,
    'medium': 10,
    'hard': 25,
    'tech': 40
}

# Number ninja (arithmetic)
MATH_DURATION_TICKS = 120
MATH_STEP_TICKS = 6
MATH_COUNTDOWN_TICKS = 5

# Feedback display (ticks)
FEEDBACK_TICKS = 1

# Tournament settings
TOURNAMENT_NAME = 'Math Battle Arena'
TOURNAMENT_MAX_PLAYERS = 12
TOURNAMENT_DURATION_TICKS = 120
TOURNAMENT_COUNTDOWN_TICKS = 5
TOURNAMENT_PRIZES = ['🏆 Winner Badge', '🥇 Gold Medal', '💎 Premium Access']
BOT_ROSTER = ['MathWizard', 'NumberNinja', 'Calculator', 'QuickSum', 'BrainPower']

# Synthetic opponents
BOT_SCORE_PROBABILITY = 0.3
BOT_MIN_POINTS = 20
BOT_MAX_POINTS = 69
BOT_STREAK_KEEP_PROBABILITY = 0.7
BOT_INTERVAL_TICKS = 2
