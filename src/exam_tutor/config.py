"""
Configuration file for the Exam Tutor session engine.

Modify these values to customize generation behavior.
"""

# Model Configuration
MODEL_NAME = "gemini-2.5-flash"
API_KEY_ENV_VAR = "GEMINI_API_KEY"

# Sampling temperatures (higher for quiz uniqueness, lower for explanations)
TUTORIAL_TEMPERATURE = 0.7
QUIZ_TEMPERATURE = 0.8
EXPLANATION_TEMPERATURE = 0.5

# Quiz Settings
QUIZ_SIZE = 20
OPTIONS_PER_QUESTION = 4
PASS_MARK_PERCENT = 50

# Exam year selector: the most recent year and how many years back it spans
LATEST_YEAR = 2025
YEAR_WINDOW = 16

# Placeholders used when the learner leaves the topic empty
DEFAULT_TUTORIAL_TOPIC = "General Review"
DEFAULT_QUIZ_TOPIC = "General Syllabus"

# Explanation fallbacks
FALLBACK_EXPLANATION = "Explanation could not be generated due to connection issues."
SKIPPED_ANSWER_TEXT = "Skipped"
UNKNOWN_OPTION_TEXT = "Unknown"

# Shared formatting rule for every prompt that may contain mathematics
MATH_FORMAT_RULE = """CRITICAL: Write ALL mathematical equations using STRICT LaTeX syntax enclosed in single dollar signs ($...$).
   Example: "{example}".
   Do NOT use Unicode characters for math (like √ or ÷). ALWAYS use LaTeX ($\\sqrt{{x}}$ or $\\div$)."""

# Tutorial Prompt Template
TUTORIAL_PROMPT_TEMPLATE = """You are a seasoned {exam_type} examiner and tutor.
Create a comprehensive, exam-focused study tutorial for the following parameters:

Subject: {subject}
Topic: {topic}
Exam Standard: {exam_type}
Target Year Style: {year}

Requirements:
1. Structure it logically with clear headings (Introduction, Key Concepts, Examples, Summary).
2. Use a professional, encouraging tone suitable for students.
3. Include at least 3 worked examples typical of {exam_type} questions.
4. Highlight common pitfalls candidates make in this topic.
5. UNIQUE SEED: {seed} (Ensure this content is generated freshly and doesn't repeat generic templates).
6. Format using Markdown.
7. {math_rule}"""

# Quiz Prompt Template
QUIZ_PROMPT_TEMPLATE = """Generate {num_questions} completely unique, {exam_type}-standard multiple-choice questions (MCQs).
Subject: {subject}
Topic: {topic}
Year Standard: {year}

Rules:
1. Questions must be difficult enough for a final year secondary school student.
2. Provide {num_options} distinct options for each question.
3. Ensure the correct answer is unambiguous.
4. Random Seed: {seed} (Do not repeat questions from common datasets).
5. {math_rule}
6. Return strict JSON."""

# Explanation Prompt Template
EXPLANATION_PROMPT_TEMPLATE = """You are an expert {exam_type} tutor. A student failed these questions in {subject}.

For EACH question provided below:
1. Provide a direct, clear explanation of the correct answer.
2. If it involves calculation (Math/Physics/Chem), YOU MUST SHOW THE STEP-BY-STEP SOLUTION.
3. Format using Markdown (use bolding for key terms, bullet points for steps).
4. {math_rule}
5. Keep it concise but helpful.

Questions:
{failures}

Output: JSON Array of strings (one explanation per question)."""
