from __future__ import annotations

from typing import Any, Iterable

from models import (
    Question,
    QuestionView,
    ScoredResult,
    Session,
    SessionReport,
)


def question_from_payload(item: object, index: int) -> Question:
    """Build a Question from one raw record; ValueError when malformed."""
    if not isinstance(item, dict):
        raise ValueError(f"question #{index}: expected an object")
    text = item.get("question")
    answers = item.get("answers")
    correct = item.get("correct")
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"question #{index}: 'question' must be a non-empty string")
    if not isinstance(answers, list) or not all(isinstance(a, str) for a in answers):
        raise ValueError(f"question #{index}: 'answers' must be a list of strings")
    if not isinstance(correct, str):
        raise ValueError(f"question #{index}: 'correct' must be a string")
    if answers and correct not in answers:
        raise ValueError(f"question #{index}: 'correct' is not one of 'answers'")
    return Question(question=text, answers=tuple(answers), correct=correct)


def question_to_payload(question: Question, index: int | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "question": question.question,
        "answers": list(question.answers),
        "freeText": question.is_free_text,
    }
    if index is not None:
        payload["id"] = index
    return payload


def session_to_payload(session: Session) -> dict[str, Any]:
    return {
        "id": session.id,
        "timestamp": session.timestamp,
        "totalQuestions": session.total_questions,
        "currentQuestionIndex": session.current_question_index,
        "score": session.score,
        "isTest": session.is_test,
        "questionIds": list(session.question_ids),
        "answeredQuestions": sorted(session.answered_questions),
        "completed": session.completed,
    }


def _int_list(value: object, name: str) -> list[int]:
    if not isinstance(value, list):
        raise ValueError(f"'{name}' must be a list")
    result = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int):
            raise ValueError(f"'{name}' must contain integers")
        result.append(item)
    return result


def session_from_payload(payload: object) -> Session:
    """Rebuild a Session from its stored record; ValueError when it breaks invariants."""
    if not isinstance(payload, dict):
        raise ValueError("session record must be an object")
    session_id = payload.get("id")
    if not isinstance(session_id, str) or not session_id:
        raise ValueError("session 'id' is required")

    question_ids = _int_list(payload.get("questionIds"), "questionIds")
    answered = _int_list(payload.get("answeredQuestions", []), "answeredQuestions")
    total = payload.get("totalQuestions", len(question_ids))
    if (
        not question_ids
        or total != len(question_ids)
        or len(set(question_ids)) != len(question_ids)
    ):
        raise ValueError(f"session {session_id}: inconsistent questionIds")
    if any(position < 0 or position >= total for position in answered):
        raise ValueError(f"session {session_id}: answered position out of range")

    current = payload.get("currentQuestionIndex", 0)
    score = payload.get("score", 0)
    if not isinstance(current, int) or not 0 <= current < total:
        raise ValueError(f"session {session_id}: currentQuestionIndex out of range")
    if not isinstance(score, int) or not 0 <= score <= len(set(answered)):
        raise ValueError(f"session {session_id}: invalid score")

    timestamp = payload.get("timestamp", 0)
    return Session(
        id=session_id,
        timestamp=int(timestamp) if isinstance(timestamp, (int, float)) else 0,
        question_ids=question_ids,
        is_test=bool(payload.get("isTest", False)),
        current_question_index=current,
        score=score,
        answered_questions=set(answered),
        completed=bool(payload.get("completed", False)),
    )


def sessions_to_blob(sessions: Iterable[Session], current_id: str | None) -> dict[str, Any]:
    return {
        "sessions": [session_to_payload(session) for session in sessions],
        "currentSessionId": current_id,
    }


def view_to_payload(view: QuestionView, total: int) -> dict[str, Any]:
    return {
        "position": view.position,
        "number": view.position + 1,
        "total": total,
        "answered": view.answered,
        "viewOnly": view.view_only,
        "question": question_to_payload(view.question),
    }


def result_to_payload(result: ScoredResult) -> dict[str, Any]:
    return {
        "position": result.position,
        "answer": result.answer,
        "isCorrect": result.is_correct,
        "scored": result.scored,
        "correct": result.question.correct,
    }


def report_to_payload(report: SessionReport) -> dict[str, Any]:
    return {
        "isTest": report.is_test,
        "totalQuestions": report.total_questions,
        "answered": report.answered,
        "correct": report.correct,
        "wrong": report.wrong,
        "unanswered": report.unanswered,
        "percentage": report.percentage,
        "missed": [
            {
                "question": item.question,
                "answers": list(item.answers),
                "givenAnswer": item.given_answer,
                "correctAnswer": item.correct_answer,
            }
            for item in report.missed
        ],
    }
