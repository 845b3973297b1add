import logging

import streamlit as st
from gpa_calculator.grade_engine import (
    ValidationError,
    classification_table,
    format_average,
    grading_scale_table,
)
from gpa_calculator.io_csv import (
    courses_frame,
    load_into_session,
    parse_courses,
    parse_semesters,
    read_csv_upload,
    validate_courses_csv,
    validate_semesters_csv,
)
from gpa_calculator.session import CalculationSession

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ------------------------
# Streamlit UI
# ------------------------

st.set_page_config(
    page_title="GPA Calculator | Current GPA & CGPA",
    page_icon="🎓",
    layout="wide",
)

st.title("🎓 GPA Calculator")
st.write(
    "Add your courses with their unit load and score (0-100) to get your current GPA "
    "on the 5-point scale. Include previous semesters to get your CGPA."
)

if "session" not in st.session_state:
    st.session_state["session"] = CalculationSession()
session: CalculationSession = st.session_state["session"]


def _validation_message(e: ValidationError) -> str:
    if e.reason == "missing fields":
        return "Please fill in all course details."
    if e.field == "unit":
        return "Please enter a valid unit (>0)."
    if e.field == "score":
        return "Please enter a valid score (0-100)."
    if e.field == "total_units":
        return "Previous total units must be greater than 0."
    return "Previous total TUGP cannot be negative."


# ------------------------
# Add course
# ------------------------

with st.form("add_course_form", clear_on_submit=True):
    st.subheader("1. Add course")
    c1, c2, c3 = st.columns(3)
    with c1:
        course_name = st.text_input("Course name", placeholder="e.g., Mathematics")
    with c2:
        course_unit = st.text_input("Course unit", placeholder="e.g., 3")
    with c3:
        course_score = st.text_input("Score (0-100)", placeholder="e.g., 85")

    if st.form_submit_button("Add course", type="primary"):
        try:
            course = session.add_course(course_name, course_unit, course_score)
        except ValidationError as e:
            st.error(_validation_message(e))
        else:
            st.success(f"{course.name} has been added successfully")

# ------------------------
# Previous semesters (CGPA)
# ------------------------

with st.expander("Calculate CGPA (include previous results)"):
    with st.form("add_semester_form", clear_on_submit=True):
        s1, s2 = st.columns(2)
        with s1:
            previous_tugp = st.text_input("Previous total TUGP", placeholder="e.g., 75.5")
        with s2:
            previous_units = st.text_input("Previous total units", placeholder="e.g., 18")

        if st.form_submit_button("Add previous semester"):
            try:
                session.add_semester(previous_tugp, previous_units)
            except ValidationError as e:
                st.error(_validation_message(e))

    for idx, semester in enumerate(session.semesters):
        col_text, col_btn = st.columns([6, 1])
        with col_text:
            st.write(
                f"Semester {idx + 1}: TUGP {semester.total_grade_points:g} "
                f"over {semester.total_units:g} units"
            )
        with col_btn:
            st.button(
                "Remove",
                key=f"remove_semester_{semester.id}",
                on_click=session.remove_semester,
                args=(semester.id,),
            )

# ------------------------
# Optional CSV upload
# ------------------------

with st.expander("Upload from CSV"):
    up1, up2 = st.columns(2)
    with up1:
        courses_csv = st.file_uploader(
            "Courses CSV (Name, Unit, Score)", type=["csv"], key="courses_csv"
        )
    with up2:
        semesters_csv = st.file_uploader(
            "Previous semesters CSV (TUGP, Total Units)", type=["csv"], key="semesters_csv"
        )

    if st.button("Load CSV rows"):
        course_rows, semester_rows = [], []
        upload_error = None
        try:
            if courses_csv is not None:
                course_rows = parse_courses(validate_courses_csv(read_csv_upload(courses_csv)))
            if semesters_csv is not None:
                semester_rows = parse_semesters(
                    validate_semesters_csv(read_csv_upload(semesters_csv))
                )
        except ValueError as e:
            upload_error = str(e)

        if upload_error:
            st.error(f"CSV error: {upload_error}")
        else:
            for message in load_into_session(session, course_rows, semester_rows):
                st.warning(message)

# ------------------------
# Courses and results
# ------------------------

if session.courses:
    st.markdown("---")
    head, clear_col = st.columns([6, 1])
    with head:
        st.subheader(f"Courses ({len(session.courses)})")
    with clear_col:
        st.button("Clear all", type="secondary", on_click=session.clear_all)

    st.dataframe(courses_frame(session.courses), use_container_width=True, hide_index=True)

    remove_options = {f"{idx + 1}. {c.name}": c.id for idx, c in enumerate(session.courses)}
    r1, r2 = st.columns([4, 1])
    with r1:
        to_remove = st.selectbox("Remove a course", list(remove_options.keys()))
    with r2:
        st.button(
            "Remove",
            key="remove_course",
            on_click=session.remove_course,
            args=(remove_options.get(to_remove),),
        )

    summary = session.summary()

    st.markdown("---")
    st.subheader("Results")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Current GPA", format_average(summary.current_average))
        st.caption(summary.classification)
    with col2:
        st.metric("CGPA", format_average(summary.cumulative_average))
        if summary.cumulative_classification is not None:
            st.caption(summary.cumulative_classification)
    with col3:
        st.metric("Total units", f"{summary.total_units:g}")
    with col4:
        st.metric("Total TUGP", f"{summary.total_grade_points:.2f}")
else:
    st.info("Add a course to get started.")

# ------------------------
# Grading system reference
# ------------------------

st.header("Grading System")
g1, g2 = st.columns(2)
with g1:
    st.dataframe(grading_scale_table(), use_container_width=True, hide_index=True)
with g2:
    st.dataframe(classification_table(), use_container_width=True, hide_index=True)

# To run:
# streamlit run app.py
