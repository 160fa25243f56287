"""SQL statements for the ``student`` table.

Placeholders use the qmark style understood by sqlite3.
"""

SELECT_ALL = "SELECT sno, name, korean, english, math, science FROM student"

INSERT_STUDENT = (
    "INSERT INTO student (sno, name, korean, english, math, science) "
    "VALUES (?, ?, ?, ?, ?, ?)"
)

UPDATE_STUDENT = (
    "UPDATE student SET name = ?, korean = ?, english = ?, math = ?, science = ? "
    "WHERE sno = ?"
)

DELETE_STUDENT = "DELETE FROM student WHERE sno = ?"

# Clamped per-subject sum, so storage ordering agrees with normalized output
CLAMPED_TOTAL = (
    "(MIN(MAX(korean, 0), 100) + MIN(MAX(english, 0), 100)"
    " + MIN(MAX(math, 0), 100) + MIN(MAX(science, 0), 100))"
)

ORDER_BY_NAME = f"{SELECT_ALL} ORDER BY name ASC"
ORDER_BY_SNO = f"{SELECT_ALL} ORDER BY sno ASC"
ORDER_BY_TOTAL = f"{SELECT_ALL} ORDER BY {CLAMPED_TOTAL} DESC"
