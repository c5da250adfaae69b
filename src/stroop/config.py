"""
All task constants. No imports from other stroop modules.
All time values are in milliseconds; names carry an _MS suffix.
"""

# Stimulus space: declared order drives generation order and response indices
WORDS: list[str] = ["RED", "GREEN", "BLUE", "YELLOW"]
COLORS: list[dict] = [
    {"name": "RED", "hex": "red", "index": 0},
    {"name": "GREEN", "hex": "green", "index": 1},
    {"name": "BLUE", "hex": "blue", "index": 2},
    {"name": "YELLOW", "hex": "yellow", "index": 3},
]
CHOICES: tuple[str, ...] = tuple(c["name"] for c in COLORS)  # response buttons, index == response

# Timeline defaults
DEFAULT_PRACTICE_TRIALS_PER_CONDITION: int = 1
DEFAULT_MAIN_TRIALS_PER_CONDITION: int = 6
DEFAULT_TRIAL_TIMEOUT_MS: int = 3000
DEFAULT_FIXATION_MIN_MS: int = 300
DEFAULT_FIXATION_MAX_MS: int = 1000
DEFAULT_SHOW_PRACTICE_FEEDBACK: bool = True
DEFAULT_INCLUDE_FIXATION: bool = True
DEFAULT_SHOW_INSTRUCTIONS: bool = True
DEFAULT_SHOW_RESULTS: bool = True

# Practice over-samples incongruent stimuli relative to congruent ones
PRACTICE_INCONGRUENT_RATIO: int = 3

# Screen timings
FEEDBACK_DUR_MS: int = 2000
POST_TRIAL_GAP_MS: int = 500

# Phase tags carried by trial data
TASK_FIXATION: str = "fixation"
TASK_PRACTICE: str = "practice"
TASK_RESPONSE: str = "response"

# Participant IDs: XXXX-XXXX-XXXX-XXXX, uppercase hex
PARTICIPANT_ID_GROUPS: int = 4
PARTICIPANT_ID_GROUP_LEN: int = 4
PARTICIPANT_ID_ALPHABET: str = "0123456789ABCDEF"
PARTICIPANT_ID_PATTERN: str = r"^[A-Za-z0-9-]+$"

# Screen text
WELCOME_TEXT: str = (
    "Welcome to the Stroop Task!\n\n"
    "In this experiment, you will see words printed in different colors.\n"
    "Your task is to identify the color of the ink the word is printed in, "
    "NOT the word itself.\n"
    "Please respond as quickly and accurately as possible."
)
INSTRUCTION_PAGES: tuple[str, ...] = (
    "Instructions\n\n"
    'You will see a word (e.g., "RED", "BLUE") displayed in one of four ink colors: '
    "red, green, blue, or yellow.\n"
    "Your task is to click the button corresponding to the INK COLOR of the word, "
    "ignoring what the word says.\n"
    "Click the colored buttons that will appear below each word: "
    + ", ".join(CHOICES) + ".",
    "Examples\n\n"
    "If you see the word RED (written in BLUE ink), you should click the BLUE button.\n"
    "If you see the word GREEN (written in GREEN ink), you should click the GREEN button.\n"
    "There will be a short practice session first.",
)
DEBRIEF_TEXT: str = (
    "Practice Complete!\n\n"
    "Great job! You've finished the practice trials.\n"
    "Now you'll begin the main experiment.\n"
    "Remember:\n"
    "  - Respond to the ink color, not the word\n"
    "  - Be as fast and accurate as possible\n"
    "  - Click the colored buttons for Red, Green, Blue, Yellow"
)
NO_DATA_TEXT: str = "No trial data found."

# Button labels
WELCOME_BUTTON: str = "Continue"
INSTRUCTIONS_BUTTONS: dict[str, str] = {
    "previous": "Previous",
    "next": "Next",
    "finish": "Begin Practice",
}
FEEDBACK_BUTTON: str = "Continue"
DEBRIEF_BUTTON: str = "Start Experiment"
RESULTS_BUTTON: str = "Download Data"

# Simulated participant defaults
SIM_ACCURACY: float = 0.95
SIM_CONGRUENT_RT_MS: float = 550.0
SIM_INCONGRUENT_RT_MS: float = 650.0
SIM_RT_SD_MS: float = 80.0
SIM_MIN_RT_MS: int = 150
