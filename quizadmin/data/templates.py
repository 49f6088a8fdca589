"""Starter templates offered for download in the editors."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional


def _mc_option(order: int, text: str, correct: bool, explanation: str) -> Dict[str, Any]:
    return {
        "order": order,
        "name": chr(64 + order),
        "optionText": text,
        "optionImage": "",
        "explanation": explanation,
        "isCorrectAnswer": correct,
    }


def sample_quiz_template(today: Optional[date] = None) -> Dict[str, Any]:
    """Quiz template in the app's camelCase export format."""
    today = today or date.today()
    return {
        "quizId": "sample_quiz_template_001",
        "quizName": "Sample Quiz Template - Ecological Interactions",
        "topicId": "topic_general_biology",
        "version": "1.0.0",
        "createdDate": today.isoformat(),
        "accessLevel": "PAID",
        "defaultIsFree": False,
        "totalQuestions": 3,
        "estimatedDuration": 5,
        "difficultyLevel": "INTERMEDIATE",
        "tags": ["ecology", "energy_flow", "biology"],
        "questions": [
            {
                "number": 1,
                "questionId": "q_energy_source_001",
                "type": "MULTIPLE_CHOICE",
                "quizText": "What is the ultimate source of energy for most living organisms on Earth?",
                "quizImage": "",
                "isFree": False,
                "part": "A",
                "mainQuestion": 1,
                "hasSubQuestions": False,
                "difficultyLevel": "INTERMEDIATE",
                "marks": 2,
                "timeAllocation": 2,
                "learningObjective": "Identify the primary source of energy in ecosystems",
                "options": [
                    _mc_option(1, "Water", False, "Water is essential for life but is not an energy source."),
                    _mc_option(2, "The Sun", True, "Producers convert solar energy into chemical energy."),
                    _mc_option(3, "Soil", False, "Soil provides nutrients, not the initial energy."),
                    _mc_option(4, "Wind", False, "Wind is not the primary source for living organisms."),
                ],
            },
            {
                "number": 2,
                "questionId": "q_energy_matter_flow_002",
                "type": "TRUE_FALSE",
                "quizText": "Energy in an ecosystem is recycled, while matter flows in one direction.",
                "isFree": True,
                "mainQuestion": 2,
                "difficultyLevel": "INTERMEDIATE",
                "marks": 1,
                "timeAllocation": 1.5,
                "learningObjective": "Distinguish between energy flow and matter cycling",
                "isCorrectAnswer": False,
                "explanation": "Energy flows one way and is lost as heat; matter is recycled.",
            },
            {
                "number": 3,
                "questionId": "q_consumer_types_003",
                "type": "FILL_IN_THE_BLANK",
                "quizText": "Organisms that feed on plants are called herbivores or ___ consumers.",
                "isFree": False,
                "mainQuestion": 3,
                "difficultyLevel": "BEGINNER",
                "marks": 1,
                "timeAllocation": 1,
                "learningObjective": "Classify consumers by trophic level",
                "blankIndex": 53,
                "correctAnswer": "primary",
                "questionVersion": "1.1",
                "changeLog": "Updated explanation for clarity",
            },
        ],
        "metadata": {
            "totalMarks": 4,
            "passingScore": 3,
            "timeLimit": 5,
            "attempts": 3,
            "showCorrectAnswers": True,
            "randomizeQuestions": False,
            "randomizeOptions": True,
        },
    }


def sample_past_paper_template() -> Dict[str, Any]:
    """Nested past-paper template with one section per question type."""
    return {
        "title": "Comprehensive Quiz & Exam Template",
        "description": "Every supported question type with multimedia fields at each level.",
        "paper_info": {
            "paper_number": 1,
            "paper_level": "General",
            "paper_type": "template",
            "subject_id": "mixed_subjects",
            "total_questions": 8,
            "total_marks": 45,
            "estimated_time_minutes": 15,
        },
        "instructions": [
            "Answer ALL questions in this paper.",
            "Read each question carefully before answering.",
        ],
        "sections": [
            {
                "section_id": "mcq",
                "section_name": "Section A: Multiple Choice Questions",
                "section_description": "Choose the single best answer for each question.",
                "section_image": "https://example.com/images/section_a_header.png",
                "questions": [{
                    "id": "q001", "question_number": 1,
                    "question_text": "Which of the following flags belongs to Japan?",
                    "question_type": "multiple_choice",
                    "options": [
                        {"option_letter": "A", "option_text": "Flag A", "is_correct": False,
                         "option_image": "https://example.com/images/flag_canada.png",
                         "feedback": "This is the flag of Canada."},
                        {"option_letter": "B", "option_text": "Flag B", "is_correct": True,
                         "option_image": "https://example.com/images/flag_japan.png",
                         "feedback": "Correct! This is the Hinomaru."},
                        {"option_letter": "C", "option_text": "Flag C", "is_correct": False,
                         "option_image": "https://example.com/images/flag_brazil.png",
                         "feedback": "This is the flag of Brazil."},
                    ],
                    "correct_answer": "B",
                    "explanation": "The Hinomaru is a red disc on a white background.",
                    "marks": 5, "is_free": True, "difficulty_level": "beginner", "time_allocation": 60,
                }],
            },
            {
                "section_id": "tf",
                "section_name": "Section B: True/False",
                "questions": [{
                    "id": "q002", "question_number": 2,
                    "question_text": "Listen to the audio clip. Is this the sound of a lion roaring?",
                    "question_type": "true_false",
                    "question_audio": "https://example.com/audio/tiger_growl.mp3",
                    "options": [
                        {"option_letter": "True", "option_text": "True", "is_correct": False},
                        {"option_letter": "False", "option_text": "False", "is_correct": True},
                    ],
                    "correct_answer": "False",
                    "marks": 5, "is_free": True, "time_allocation": 45,
                }],
            },
            {
                "section_id": "sa",
                "section_name": "Section C: Short Answer",
                "questions": [{
                    "id": "q003", "question_number": 3,
                    "question_text": "What is the name of the landmark shown in the image?",
                    "question_type": "short_answer",
                    "question_image": "https://example.com/images/eiffel_tower.jpg",
                    "correct_answer": "Eiffel Tower",
                    "marks": 5, "is_free": True,
                }],
            },
            {
                "section_id": "fib",
                "section_name": "Section D: Fill in the Blank",
                "questions": [{
                    "id": "q004", "question_number": 4,
                    "question_text": "The largest planet in our solar system is ____.",
                    "question_type": "fill_in_blank",
                    "correct_answer": "Jupiter",
                    "marks": 5,
                }],
            },
            {
                "section_id": "essay",
                "section_name": "Section E: Short Essay",
                "questions": [{
                    "id": "q005", "question_number": 5,
                    "question_text": "Watch the video about the water cycle. Briefly explain evaporation.",
                    "question_type": "short_essay",
                    "question_video": "https://example.com/videos/water_cycle.mp4",
                    "correct_answer": "Model Answer: liquid water heats up, becomes vapour and rises.",
                    "marks": 10, "is_free": False, "difficulty_level": "intermediate",
                    "time_allocation": 300,
                }],
            },
            {
                "section_id": "match",
                "section_name": "Section F: Matching",
                "questions": [{
                    "id": "q006", "question_number": 6,
                    "question_text": "Match the artist to their painting.",
                    "question_type": "matching",
                    "column_a": [
                        {"item_number": "1", "item_text": "Leonardo da Vinci", "correct_match": "B"},
                        {"item_number": "2", "item_text": "Vincent van Gogh", "correct_match": "A"},
                    ],
                    "column_b": [
                        {"item_letter": "A", "item_text": "The Starry Night"},
                        {"item_letter": "B", "item_text": "Mona Lisa"},
                    ],
                    "marks": 5, "difficulty_level": "intermediate",
                }],
            },
            {
                "section_id": "order",
                "section_name": "Section G: Ordering",
                "questions": [{
                    "id": "q007", "question_number": 7,
                    "question_text": "Arrange the butterfly life cycle stages in order.",
                    "question_type": "ordering",
                    "items": [
                        {"item_id": "pupa", "item_text": "Pupa", "correct_position": 3},
                        {"item_id": "adult", "item_text": "Butterfly", "correct_position": 4},
                        {"item_id": "egg", "item_text": "Eggs", "correct_position": 1},
                        {"item_id": "larva", "item_text": "Caterpillar", "correct_position": 2},
                    ],
                    "correct_order": "egg, larva, pupa, adult",
                    "marks": 5,
                }],
            },
            {
                "section_id": "mr",
                "section_name": "Section H: Multiple Response",
                "questions": [{
                    "id": "q008", "question_number": 8,
                    "question_text": "Select ALL percussion instruments.",
                    "question_type": "multiple_response",
                    "options": [
                        {"option_letter": "A", "option_text": "Drums", "is_correct": True},
                        {"option_letter": "B", "option_text": "Flute", "is_correct": False},
                        {"option_letter": "C", "option_text": "Xylophone", "is_correct": True},
                        {"option_letter": "D", "option_text": "Violin", "is_correct": False},
                    ],
                    "correct_answers": ["A", "C"],
                    "marks": 5,
                }],
            },
        ],
    }
