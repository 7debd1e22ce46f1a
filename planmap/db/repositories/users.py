from sqlalchemy.orm import Session
from planmap.db.models import User, Profile
from typing import Dict, Any, Optional

class UserRepository:
    """Repository for auth identities and their profiles."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create_user(self, email: str, password_hash: str, username: str = None) -> User:
        """
        Create an identity together with its profile row.
        
        Args:
            email: Login e-mail (stored lower-cased)
            password_hash: Encoded password hash
            username: Display name for the profile (optional)
            
        Returns:
            Created user
        """
        user = User(email=email.lower(), password_hash=password_hash)
        user.profile = Profile(username=username)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
    
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
    
    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()
    
    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.id == user_id).first()
    
    def update_profile(self, profile: Profile, fields: Dict[str, Any]) -> Profile:
        """
        Apply the given fields to a profile.
        
        Args:
            profile: Profile to update
            fields: Column values keyed by column name
            
        Returns:
            Updated profile
        """
        for key, value in fields.items():
            setattr(profile, key, value)
        self.db.commit()
        self.db.refresh(profile)
        return profile
