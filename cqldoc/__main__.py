from cqldoc.main import main

main()
