from repo_qa.main import main

main()
