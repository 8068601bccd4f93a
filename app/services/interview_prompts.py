"""
Prompt builders for the mock interview engine.
"""
from typing import Optional, Sequence, Tuple

from app.db.models.interview_session import InterviewMode
from app.services.interview_types import CandidateContext

# (question, answer, score) for one finished turn
Turn = Tuple[str, Optional[str], Optional[int]]

MODE_DESCRIPTIONS = {
    InterviewMode.HR: "HR/General interview focusing on background, motivation, cultural fit, and soft skills",
    InterviewMode.TECHNICAL: "Technical interview with coding problems, system design, architecture questions, and technical concepts",
    InterviewMode.BEHAVIORAL: "Behavioral interview using STAR method (Situation, Task, Action, Result) to assess past experiences and problem-solving",
}

MODE_GUIDANCE = {
    InterviewMode.HR: "Assess cultural fit, motivation and career goals.",
    InterviewMode.TECHNICAL: "Include coding, architecture or system design.",
    InterviewMode.BEHAVIORAL: "Use a STAR method prompt (Situation, Task, Action, Result).",
}

QUOTE_CHARS = "\"'"


def clean_question_text(text: str) -> str:
    """Trim and strip one leading and one trailing quote character."""
    cleaned = text.strip()
    if cleaned[:1] in QUOTE_CHARS:
        cleaned = cleaned[1:]
    if cleaned[-1:] in QUOTE_CHARS:
        cleaned = cleaned[:-1]
    return cleaned.strip()


def _candidate_block(candidate: Optional[CandidateContext]) -> str:
    if candidate is None or not candidate.has_profile:
        return "- No profile information available"
    skills = ", ".join(candidate.skills) or "None listed"
    return (
        f"- Headline: {candidate.headline or 'Not provided'}\n"
        f"- Skills: {skills}\n"
        f"- Experience: {candidate.experience_years or 0} years"
    )


def build_first_question_prompt(
    mode: InterviewMode,
    target_role: str,
    candidate: Optional[CandidateContext] = None,
) -> str:
    mode = InterviewMode(mode)
    resume = (candidate.resume_excerpt if candidate else None) or "No resume available"
    return f"""You are an experienced interviewer conducting a {MODE_DESCRIPTIONS[mode]} for the role of {target_role}.

CANDIDATE CONTEXT:
{_candidate_block(candidate)}

Resume Summary: {resume}

Generate the FIRST interview question for this candidate. The question should be:
- Appropriate for a {mode.value} interview
- Relevant to the {target_role} position
- Clear and professional
- Open-ended to encourage detailed responses

Return ONLY the interview question text, nothing else."""


def build_evaluation_prompt(mode: InterviewMode, target_role: str, question: str, answer: str) -> str:
    mode = InterviewMode(mode)
    return f"""You are an expert interviewer evaluating a candidate's answer for a {mode.value} interview for the role of {target_role}.

QUESTION ASKED:
{question}

CANDIDATE'S ANSWER:
{answer}

Evaluate this answer and provide:
1. A score from 0-100
2. Constructive feedback (2-3 sentences)
3. 2-3 key strengths in the answer
4. 2-3 areas for improvement

Return a JSON object with this exact structure:
{{
  "score": <integer 0-100>,
  "feedback": "<string>",
  "strengths": ["<strength1>", "<strength2>"],
  "improvements": ["<improvement1>", "<improvement2>"]
}}"""


def format_history(turns: Sequence[Turn]) -> str:
    """Render prior turns as `Q: ... / A: ... (Score: s/100)` blocks."""
    blocks = []
    for question, answer, score in turns:
        blocks.append(f"Q: {question}\nA: {answer or 'No answer'} (Score: {score or 0}/100)")
    return "\n\n".join(blocks)


def build_next_question_prompt(
    mode: InterviewMode,
    target_role: str,
    turns: Sequence[Turn],
    question_number: int,
    total: int,
) -> str:
    mode = InterviewMode(mode)
    return f"""You are an experienced interviewer conducting a {mode.value} interview for {target_role}.

INTERVIEW CONTEXT:
- Question {question_number} of {total}
- Previous questions and answers:

{format_history(turns)}

Generate the NEXT interview question that:
1. Builds on previous answers naturally
2. Explores different aspects of the {mode.value} interview
3. Is appropriate for the {target_role} position
4. Maintains professional interview flow
5. {MODE_GUIDANCE[mode]}

Return ONLY the next question text, nothing else."""


def build_closing_feedback_prompt(
    mode: InterviewMode,
    target_role: str,
    overall_score: int,
    turns: Sequence[Turn],
) -> str:
    mode = InterviewMode(mode)
    transcript = "\n\n".join(
        f"Q{idx}: {question}\nA{idx}: {answer or 'No answer provided'}\nScore: {score or 0}/100"
        for idx, (question, answer, score) in enumerate(turns, start=1)
    )
    return f"""You are an expert career coach providing final feedback for an interview.

INTERVIEW DETAILS:
- Role: {target_role}
- Interview Type: {mode.value}
- Average Score: {overall_score}/100
- Total Questions: {len(turns)}

QUESTIONS AND ANSWERS:
{transcript}

Provide comprehensive interview feedback (3-4 sentences) covering:
1. Overall performance assessment
2. Key strengths demonstrated
3. Main areas for improvement
4. Encouragement and next steps

Return ONLY the feedback text, no JSON or formatting."""
