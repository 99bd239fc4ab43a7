"""iamcommitted - AI micro bot for generating Git commit messages."""

from tapwork.descriptor import PackageDescriptor

VERSION = "0.1.0"

iamcommitted = PackageDescriptor(
    name="iamcommitted",
    description="AI micro bot for generating Git commit messages",
    homepage="https://github.com/darkin100/iamcommitted",
    url=(
        "https://github.com/darkin100/iamcommitted/releases/download/"
        f"v{VERSION}/iamcommitted-v{VERSION}-macos.tar.gz"
    ),
    # Filled in once the first release is published; installs fail verification until then
    sha256="REPLACE_WITH_ACTUAL_SHA256_AFTER_FIRST_RELEASE",
    version=VERSION,
    license="MIT",
    caveats_text=(
        "This application requires an OpenAI API key to function.\n"
        "Please set the OPENAI_API_KEY environment variable:\n"
        '  export OPENAI_API_KEY="your_api_key_here"\n'
    ),
)
