"""
Password Reset Example - Forgot password, check the code, reset.

Runs on asyncio directly. Reads settings from MESH_* environment variables.
"""

import asyncio

from mesh_session import MeshClient, ResetPassword, UserVerificationCheck


async def main():
    client = MeshClient.from_env()

    # Start the reset; the code is delivered out of band
    verification_hash = await client.forgot_password("alice")
    print(f"Reset started, code sent to {verification_hash.hint}")
    print(f"Expires: {verification_hash.expires}")

    code = input("Verification code: ").strip()
    check = UserVerificationCheck.from_hash(verification_hash, code)

    if not await client.check_hash(check):
        print("Code rejected or expired")
        return

    await client.reset_password(ResetPassword.from_check(check, "n3w-s3cret"))
    print("Password reset")

    # Log in with the new password
    await client.login_with_password("alice", "n3w-s3cret")
    print(f"Logged in: {client.is_authenticated}")
    await client.signout()


if __name__ == "__main__":
    asyncio.run(main())
