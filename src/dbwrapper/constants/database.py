"""Database type constants and enumerations.

This module defines the SQL dialects supported by the client. The dialect is
fixed when a client is constructed and drives every formatting, pagination
and schema-introspection decision.
"""

from enum import Enum
from typing import Union


class DatabaseType(str, Enum):
    """Supported database servers.
    
    Values:
        MSSQL: Microsoft SQL Server (T-SQL)
            - ROW_NUMBER() based pagination
            - OUTPUT INSERTED.* for returned rows
            - ROWLOCK table hints
            - N'' prefixed national string literals
            
        MYSQL: MySQL / MariaDB
            - LIMIT based pagination
            - LAST_INSERT_ID() for inserted identities
            - Driver-native string escaping
    """
    
    MSSQL = "mssql"
    MYSQL = "mysql"
    
    @classmethod
    def parse(cls, value: Union["DatabaseType", str]) -> "DatabaseType":
        """Resolve a database type from an enum member or a case-insensitive name.
        
        Args:
            value: DatabaseType member or its string value (e.g. "MsSql")
            
        Returns:
            Matching DatabaseType
            
        Raises:
            DatabaseClientError: If the value names an unsupported dialect
        """
        if isinstance(value, cls):
            return value
        
        normalized = (value or "").strip().lower() if isinstance(value, str) else ""
        for member in cls:
            if member.value == normalized:
                return member
        
        # Lazy import to avoid circular dependency
        from dbwrapper.common.exceptions import dialect_not_supported_error
        raise dialect_not_supported_error(str(value))
