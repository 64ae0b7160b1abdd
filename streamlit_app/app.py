# streamlit_app/app.py
import streamlit as st
import sys
import os

# Add project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from streamlit_app.api import QuizAPIError, build_answers, evaluate_quiz, generate_quiz, usable_questions

# --- Page Config ---
st.set_page_config(page_title="Dynamic Quiz Generator")

# --- Session State ---
for key, default in {
    "quiz_data": None,
    "evaluation": None,
    "quiz_topic": "",
    "quiz_format": "json",
    "error": None,
}.items():
    st.session_state.setdefault(key, default)

def start_quiz(topic: str, fmt: str, count: int):
    st.session_state.error = None
    st.session_state.quiz_data = None
    st.session_state.evaluation = None
    st.session_state.quiz_topic = topic
    st.session_state.quiz_format = fmt
    try:
        with st.spinner("Generating Quiz..."):
            st.session_state.quiz_data = generate_quiz(topic, fmt, count)
    except QuizAPIError as e:
        st.session_state.error = str(e)

st.title("Dynamic Quiz Generator")

# --- Quiz Generator Form ---
with st.form("generate_form"):
    topic = st.text_input("Quiz Topic:", placeholder="e.g., Quantum Physics, World History, React Hooks")
    col_count, col_format = st.columns(2)
    count = col_count.number_input("Number of Questions:", min_value=1, max_value=20, value=5, step=1)
    fmt = col_format.selectbox("Output Format:", options=["json", "html"], format_func=str.upper)
    submitted = st.form_submit_button("Generate Quiz", type="primary")

if submitted:
    if topic.strip():
        start_quiz(topic.strip(), fmt, int(count))
    else:
        st.session_state.error = "Please enter a quiz topic."

if st.session_state.error:
    st.error(st.session_state.error)

# --- Quiz Display ---
quiz_data = st.session_state.quiz_data
if quiz_data and quiz_data.get("generatedMCQsHTML"):
    st.subheader("Your Quiz (HTML Format)")
    st.markdown(quiz_data["generatedMCQsHTML"], unsafe_allow_html=True)
    st.warning("HTML format does not support automated evaluation. Please generate a JSON quiz to evaluate.")
elif quiz_data and quiz_data.get("generatedMCQs"):
    st.subheader("Your Quiz")
    raw_questions = quiz_data["generatedMCQs"]
    questions = usable_questions(raw_questions)
    if not isinstance(raw_questions, list) or len(questions) != len(raw_questions):
        st.warning("Some generated questions were not in the expected format and were skipped.")
    selections = {}
    for q_index, mcq in enumerate(questions):
        options = mcq.get("options") or []
        selections[q_index] = st.radio(
            f"{q_index + 1}. {mcq.get('question', '')}",
            options=options,
            index=None,
            format_func=lambda opt, opts=options: f"{chr(65 + opts.index(opt))}) {opt}",
            key=f"question-{q_index}",
        )
    if st.button("Submit Quiz for Evaluation", type="primary"):
        try:
            with st.spinner("Evaluating..."):
                answers = build_answers(questions, selections)
                st.session_state.evaluation = evaluate_quiz(
                    st.session_state.quiz_topic, answers, st.session_state.quiz_format
                )
        except QuizAPIError as e:
            st.error(str(e))
elif quiz_data is not None:
    st.info("No quiz questions to display.")

# --- Evaluation Result ---
evaluation = st.session_state.evaluation
if evaluation:
    st.subheader("Quiz Evaluation Result")
    st.markdown(f"**Topic:** {evaluation['topic']}")
    st.markdown(f"**Wrong Answers:** {evaluation['wrongAnswers']}")
    if evaluation["weak"]:
        st.error(f'You are weak in "{evaluation["topic"]}". Here are some new questions to practice!')
        new_questions = evaluation.get("newQuestions")
        if isinstance(new_questions, str):
            st.markdown(new_questions, unsafe_allow_html=True)
        elif isinstance(new_questions, list):
            for index, q in enumerate(usable_questions(new_questions)):
                st.markdown(f"**{index + 1}. {q.get('question', '')}**")
                for opt in q.get("options") or []:
                    st.markdown(f"- {opt}")
                st.success(f"Answer: {q.get('answer', '')}")
                if q.get("explanation"):
                    st.caption(f"Explanation: {q['explanation']}")
        if st.button("Generate New Quiz on Weak Topic"):
            # Retakes are always five questions in the format of the original quiz
            start_quiz(evaluation["topic"], st.session_state.quiz_format, 5)
            st.rerun()
    else:
        st.success(f'Great job! You performed well in "{evaluation["topic"]}".')
