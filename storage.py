"""In-memory store for users and saved analyses."""
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional


class MemStorage:
    def __init__(self):
        self._lock = threading.RLock()
        self._users: Dict[int, Dict] = {}
        self._analyses: Dict[int, Dict] = {}
        self._user_id = 1
        self._analysis_id = 1

    def get_user(self, user_id: int) -> Optional[Dict]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[Dict]:
        with self._lock:
            for user in self._users.values():
                if user['username'] == username:
                    return user
            return None

    def create_user(self, username: str, password: str) -> Dict:
        with self._lock:
            if self.get_user_by_username(username):
                raise ValueError(f"Username '{username}' is already taken")
            user = {'id': self._user_id, 'username': username, 'password': password}
            self._users[self._user_id] = user
            self._user_id += 1
            return user

    def create_analysis(self, kind: str, passage_a: str, result: Dict, passage_b: Optional[str] = None,
                        passage_a_title: Optional[str] = None, passage_b_title: Optional[str] = None,
                        created_at: Optional[str] = None) -> Dict:
        with self._lock:
            analysis = {
                'id': self._analysis_id,
                'kind': kind,
                'passageA': passage_a,
                'passageB': passage_b,
                'passageATitle': passage_a_title,
                'passageBTitle': passage_b_title,
                'result': result,
                'createdAt': created_at or datetime.now(timezone.utc).isoformat(),
            }
            self._analyses[self._analysis_id] = analysis
            self._analysis_id += 1
            return analysis

    def get_analysis(self, analysis_id: int) -> Optional[Dict]:
        with self._lock:
            return self._analyses.get(analysis_id)

    def get_recent_analyses(self, limit: int = 10) -> List[Dict]:
        """Newest first; ties on the timestamp fall back to the newer id."""
        with self._lock:
            analyses = sorted(
                self._analyses.values(),
                key=lambda a: (a['createdAt'], a['id']),
                reverse=True,
            )
        return analyses[:max(0, limit)]


storage = MemStorage()
