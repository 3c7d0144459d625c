from passlib.context import CryptContext

# app/utils/password.py

# pbkdf2 salts every hash with fresh random bytes; verify compares in constant time
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
