"""Repository for School model operations."""

from sqlalchemy.orm import Session
from app.models.school import School


class SchoolRepository:
    """Repository for School model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, school_id: int) -> School | None:
        """
        Get school by ID.

        Args:
            school_id: School ID

        Returns:
            School object or None if not found
        """
        return self.db.query(School).filter(School.id == school_id).first()

    def get_by_code(self, code: str) -> School | None:
        """Get school by its unique code"""
        return self.db.query(School).filter(School.code == code).first()

    def get_by_ids(self, school_ids: list[int]) -> dict[int, School]:
        """Get schools keyed by ID"""
        if not school_ids:
            return {}
        schools = self.db.query(School).filter(School.id.in_(school_ids)).all()
        return {school.id: school for school in schools}

    def create(self, school: School, commit: bool = True) -> School:
        """
        Create a new school.

        Args:
            school: School object to create
            commit: Commit immediately, or only flush to get the ID assigned

        Returns:
            Created School object with ID populated
        """
        self.db.add(school)
        if commit:
            self.db.commit()
            self.db.refresh(school)
        else:
            self.db.flush()
        return school
