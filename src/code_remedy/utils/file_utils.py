class FileUtils:
    """Utility functions for file operations"""

    LANGUAGE_MAP = {
        '.py': 'python', '.js': 'javascript', '.ts': 'typescript',
        '.java': 'java', '.cpp': 'cpp', '.c': 'c', '.go': 'go',
        '.rs': 'rust', '.rb': 'ruby', '.php': 'php', '.cs': 'csharp',
        '.swift': 'swift', '.kt': 'kotlin', '.scala': 'scala',
        '.lua': 'lua', '.sh': 'bash', '.txt': 'text'
    }

    @staticmethod
    def get_language_from_extension(ext: str) -> str:
        """Get the editor language identifier from a file extension"""
        return FileUtils.LANGUAGE_MAP.get(ext.lower(), 'text')

