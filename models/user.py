import bcrypt

class User:
    """
    Represents a dashboard user.

    Users exist only in the in-memory store; there is no login flow or user endpoint.
    The password is never stored in plain text: `set_password` keeps a bcrypt hash,
    and `to_dict` leaves both the password and the hash out of the serialized form.
    """

    def __init__(self, id, username, password=None):
        self.id = id
        self.username = username # Unique across the store.
        self.password_hash = None
        if password is not None:
            self.set_password(password)

    def set_password(self, password):
        """
        Hashes the provided password and stores it in `password_hash`.

        Args:
            password (str): The plain-text password to hash.
        """
        # Salt is generated automatically by bcrypt; the hash is kept as a UTF-8 string.
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        """
        Verifies if the provided password matches the stored hashed password.

        Args:
            password (str): The plain-text password to check.

        Returns:
            bool: True if the password matches, False otherwise.
                  Returns False if no password_hash is set.
        """
        if self.password_hash:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        return False

    def to_dict(self):
        return {'id': self.id, 'username': self.username}

    def __repr__(self):
        return f'<User {self.username}>'
