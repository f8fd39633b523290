import json
import sqlite3
import threading

from domain.model import Employee
from domain.repository import EmployeeRepository
from utils import get_logger

logger = get_logger(__name__)


class SqliteEmployeeRepository(EmployeeRepository):
    """Employee roster with optional precomputed face descriptors and extra reference images."""

    def __init__(self, db_path: str = "attendance.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._initialize_database()

    def _initialize_database(self):
        with self._lock:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS employees (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    avatar_url TEXT,
                    avatar_descriptor TEXT
                )
            """)
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS employee_reference_images (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    employee_id TEXT NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
                    image_url TEXT NOT NULL
                )
            """)
            self.conn.commit()

    def add_employee(self, employee: Employee) -> dict:
        descriptor = json.dumps(employee.avatar_descriptor) if employee.avatar_descriptor is not None else None
        with self._lock:
            try:
                self.conn.execute(
                    """
                    INSERT INTO employees (id, name, avatar_url, avatar_descriptor)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        avatar_url = excluded.avatar_url,
                        avatar_descriptor = excluded.avatar_descriptor
                    """,
                    (employee.employee_id, employee.name, employee.avatar_url, descriptor),
                )
                self.conn.execute(
                    "DELETE FROM employee_reference_images WHERE employee_id = ?",
                    (employee.employee_id,),
                )
                self.conn.executemany(
                    "INSERT INTO employee_reference_images (employee_id, image_url) VALUES (?, ?)",
                    [(employee.employee_id, url) for url in employee.reference_images],
                )
                self.conn.commit()
            except sqlite3.Error as e:
                self.conn.rollback()
                logger.error(f"Error saving employee {employee.name}: {e}")
                return {"success": False, "message": str(e)}
        return {"success": True, "employee_id": employee.employee_id}

    def get_employee_by_id(self, employee_id: str) -> Employee | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT id, name, avatar_url, avatar_descriptor FROM employees WHERE id = ?",
                (employee_id,),
            ).fetchone()
            if row is None:
                return None
            images = self._reference_images()
        return self._to_employee(row, images.get(row[0], []))

    def get_all_employees(self) -> list[Employee]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT id, name, avatar_url, avatar_descriptor FROM employees ORDER BY name"
            ).fetchall()
            images = self._reference_images()
        return [self._to_employee(row, images.get(row[0], [])) for row in rows]

    def close(self):
        if self.conn:
            self.conn.close()

    def _reference_images(self) -> dict[str, list[str]]:
        images: dict[str, list[str]] = {}
        for employee_id, image_url in self.conn.execute(
            "SELECT employee_id, image_url FROM employee_reference_images ORDER BY id"
        ):
            images.setdefault(employee_id, []).append(image_url)
        return images

    @staticmethod
    def _to_employee(row, reference_images: list[str]) -> Employee:
        employee_id, name, avatar_url, descriptor = row
        return Employee(
            employee_id=employee_id,
            name=name,
            avatar_url=avatar_url,
            avatar_descriptor=json.loads(descriptor) if descriptor else None,
            reference_images=reference_images,
        )
